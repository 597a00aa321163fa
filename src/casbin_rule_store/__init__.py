"""casbin-rule-store: relational policy storage for Casbin.

This package provides:
- Rule codec: policy lines <-> fixed-width rule records (codec.py)
- Policy table access via SQLAlchemy (storage/)
- PolicyStoreAdapter: pycasbin adapter over the table (adapter.py)
- Enforcer factory and periodic policy reload (enforcer.py, reloader.py)

Note: Exceptions are defined in casbin_rule_store.exceptions
"""

__version__ = "0.1.0"

from casbin_rule_store.adapter import PolicyStoreAdapter
from casbin_rule_store.codec import (
    RuleRecord,
    build_filter_rule,
    decode_rule,
    encode_rule,
)
from casbin_rule_store.config import DatabaseConfig, EnforcerConfig
from casbin_rule_store.enforcer import ManagedEnforcer, create_enforcer
from casbin_rule_store.exceptions import (
    AdapterClosedError,
    DatabaseError,
    InvalidLinkError,
    MissingDriverError,
    MissingSourceError,
    RuleStoreError,
)
from casbin_rule_store.reloader import PolicyReloader, ReloadResult

__all__ = [
    "__version__",
    # Adapter
    "PolicyStoreAdapter",
    # Codec
    "RuleRecord",
    "build_filter_rule",
    "decode_rule",
    "encode_rule",
    # Config / enforcer
    "DatabaseConfig",
    "EnforcerConfig",
    "ManagedEnforcer",
    "PolicyReloader",
    "ReloadResult",
    "create_enforcer",
    # Exceptions
    "AdapterClosedError",
    "DatabaseError",
    "InvalidLinkError",
    "MissingDriverError",
    "MissingSourceError",
    "RuleStoreError",
]
