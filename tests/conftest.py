"""Shared pytest fixtures for modelkit tests."""

import logging

import pytest

from modelkit import Model


@pytest.fixture(autouse=True)
def reset_modelkit_logger():
    """Undo any handler installed by ``setup_logging`` (the CLI installs one)."""
    yield
    root = logging.getLogger("modelkit")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def user_model() -> type[Model]:
    """A small model with a primary key, a column alias and two rules."""
    return Model.extend(
        {
            "definition": {
                "user_id": {"type": "integer", "column": "id", "primaryKey": True},
                "name": {"type": "string", "validation": [{"rule": "required"}]},
                "email": {
                    "type": "string",
                    "column": "email_address",
                    "validation": [{"rule": "email"}],
                },
            }
        },
        name="User",
    )
