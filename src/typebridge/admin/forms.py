"""API keys form — framework-neutral render / validate / submit contract.

A hosting web framework drives the form lifecycle:

    tree = form.render(context)          # FieldSpec tree to display
    errors = form.validate(values)       # list of FieldError
    outcome = form.submit(values)        # Outcome(message, severity)

``submit`` does not catch :class:`~typebridge.exceptions.TypesenseError`;
the caller renders failures.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from typebridge.admin.keys import KeyAdministration, split_list

KEYS_DOCUMENTATION_URL = "https://typesense.org/docs/latest/api/api-keys.html#create-an-api-key"
ACTIONS_DOCUMENTATION_URL = "https://typesense.org/docs/latest/api/api-keys.html#sample-actions"

SECRET_WARNING = (
    "The generated key is only returned during creation. "
    "You need to store this key carefully in a secure place."
)


class Severity(str, Enum):
    STATUS = "status"
    WARNING = "warning"
    ERROR = "error"


class FieldSpec(BaseModel):
    """A node of the rendered form tree."""

    name: str
    type: str = Field(description="form, details, textfield, submit, table or message")
    title: str = ""
    description: str = ""
    required: bool = False
    open: bool = False
    severity: Severity | None = None
    header: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    empty: str = ""
    children: list[FieldSpec] = Field(default_factory=list)

    def find(self, name: str) -> FieldSpec | None:
        """Depth-first search for a node by name."""
        if self.name == name:
            return self
        for child in self.children:
            found = child.find(name)
            if found is not None:
                return found
        return None


class FieldError(BaseModel):
    field: str
    message: str


class Outcome(BaseModel):
    """Result of a form submission shown to the user."""

    message: str
    severity: Severity = Severity.STATUS
    warning: str | None = None


_REQUIRED = ("description", "actions", "collections")

_TABLE_HEADER = ["ID", "Key prefix", "Description", "Actions", "Collections", "Expires at", "Operations"]


class ApiKeysForm:
    """Create-key form plus the table of existing keys.

    Args:
        admin: Key administration bound to a connected server, or ``None``
            when the server is unavailable.
    """

    form_id = "typebridge_api_keys"

    def __init__(self, admin: KeyAdministration | None) -> None:
        self.admin = admin

    def render(self, context: dict[str, Any] | None = None) -> FieldSpec:
        if self.admin is None:
            return FieldSpec(
                name=self.form_id,
                type="form",
                children=[
                    FieldSpec(
                        name="unavailable",
                        type="message",
                        title="The Typesense server is not available.",
                        severity=Severity.ERROR,
                    ),
                ],
            )

        create = FieldSpec(
            name="key",
            type="details",
            title="Create API Key",
            description=f"See the documentation for more information: {KEYS_DOCUMENTATION_URL}",
            open=True,
            children=[
                FieldSpec(
                    name="description",
                    type="textfield",
                    title="Description",
                    description="Internal description to identify what the key is for.",
                    required=True,
                ),
                FieldSpec(
                    name="actions",
                    type="textfield",
                    title="Actions",
                    description=f"Comma separated list of allowed actions. See {ACTIONS_DOCUMENTATION_URL}",
                    required=True,
                ),
                FieldSpec(
                    name="collections",
                    type="textfield",
                    title="Collections",
                    description=(
                        "Comma separated list of collections that this key is scoped to. "
                        'Supports regex. Eg: coll.* will match all collections that have "coll" in their name.'
                    ),
                    required=True,
                ),
                FieldSpec(name="submit", type="submit", title="Add new"),
            ],
        )

        existing = FieldSpec(
            name="existing_keys",
            type="table",
            title="Existing API Keys",
            header=_TABLE_HEADER,
            rows=[row.model_dump() for row in self.admin.rows()],
            empty="No keys found.",
        )

        return FieldSpec(name=self.form_id, type="form", children=[create, existing])

    def validate(self, values: dict[str, Any]) -> list[FieldError]:
        errors: list[FieldError] = []
        for name in _REQUIRED:
            value = values.get(name)
            if not isinstance(value, str) or not value.strip():
                errors.append(FieldError(field=name, message=f"{name.capitalize()} field is required."))
            elif name != "description" and not split_list(value):
                errors.append(FieldError(field=name, message=f"{name.capitalize()} must list at least one value."))
        return errors

    def submit(self, values: dict[str, Any]) -> Outcome:
        """Create the key and reveal its secret exactly once."""
        if self.admin is None:
            return Outcome(message="The Typesense server is not available.", severity=Severity.ERROR)

        created = self.admin.create_key(
            values.get("description", ""),
            values.get("actions", ""),
            values.get("collections", ""),
        )
        return Outcome(
            message=f"The new key {created.secret.reveal()} has been generated.",
            severity=Severity.STATUS,
            warning=SECRET_WARNING,
        )
