"""Shared fixtures for casbin-rule-store tests.

Every test gets its own SQLite database file under tmp_path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import casbin
import pytest
from sqlalchemy import Engine, create_engine

from casbin_rule_store.adapter import PolicyStoreAdapter
from casbin_rule_store.constants import CASBIN_LOGGER_NAME, SYSTEM_LOGGER_NAME

# RBAC model used by the examples: subjects access nodes, users get roles
RBAC_MODEL = """\
[request_definition]
r = sub, obj

[policy_definition]
p = sub, obj

[role_definition]
g = _, _

[policy_effect]
e = some(where (p.eft == allow))

[matchers]
m = g(r.sub, p.sub) && r.obj == p.obj
"""

# RBAC model with actions and a second grouping type
RBAC_ACTION_MODEL = """\
[request_definition]
r = sub, obj, act

[policy_definition]
p = sub, obj, act

[role_definition]
g = _, _
g2 = _, _

[policy_effect]
e = some(where (p.eft == allow))

[matchers]
m = g(r.sub, p.sub) && g2(r.obj, p.obj) && r.act == p.act
"""


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "policy.db"


@pytest.fixture
def engine(db_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def adapter(engine: Engine) -> Iterator[PolicyStoreAdapter]:
    with PolicyStoreAdapter(engine=engine) as adapter:
        yield adapter


@pytest.fixture
def model_path(tmp_path: Path) -> Path:
    path = tmp_path / "rbac_model.conf"
    path.write_text(RBAC_MODEL)
    return path


@pytest.fixture
def action_model_path(tmp_path: Path) -> Path:
    path = tmp_path / "rbac_action_model.conf"
    path.write_text(RBAC_ACTION_MODEL)
    return path


@pytest.fixture
def enforcer(action_model_path: Path, adapter: PolicyStoreAdapter) -> casbin.Enforcer:
    """Enforcer with auto-save over the action model."""
    return casbin.Enforcer(str(action_model_path), adapter)


@pytest.fixture(autouse=True)
def reset_system_logger() -> Iterator[None]:
    """Undo configure_logging() so handlers never leak between tests."""
    yield
    for name in (SYSTEM_LOGGER_NAME, CASBIN_LOGGER_NAME):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
