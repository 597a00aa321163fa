"""Application-wide constants for casbin-rule-store.

Constants that define storage layout and runtime defaults.
For user-configurable settings per deployment, see config.py.
"""

from platformdirs import user_config_dir

# ============================================================================
# Policy Table Layout
# ============================================================================

# Table used when neither the caller nor the config names one
DEFAULT_TABLE_NAME: str = "casbin_policy"

# Column names, in storage order. v0..v5 are positional rule fields.
PTYPE_COLUMN: str = "ptype"
VALUE_COLUMNS: tuple[str, ...] = ("v0", "v1", "v2", "v3", "v4", "v5")

# A stored rule carries at most this many fields; extra fields are dropped
MAX_RULE_FIELDS: int = len(VALUE_COLUMNS)

# Column widths (VARCHAR lengths)
PTYPE_COLUMN_LENGTH: int = 10
VALUE_COLUMN_LENGTH: int = 256

# Separator used when rebuilding a policy line for the engine
POLICY_LINE_SEPARATOR: str = ", "

# Delimiter between driver and connection details in a database link
LINK_DRIVER_DELIMITER: str = ":"

# ============================================================================
# Policy Model Sections
# ============================================================================

# Sections of the in-memory model that hold persisted rules
# ("p" = permission rules, "g" = role-grouping rules)
POLICY_SECTIONS: tuple[str, ...] = ("p", "g")

# ============================================================================
# Enforcer Defaults
# ============================================================================

# Seconds between periodic policy reloads when auto_load is enabled
DEFAULT_AUTO_LOAD_INTERVAL_SECONDS: float = 60.0

# ============================================================================
# Configuration Files
# ============================================================================

APP_NAME: str = "casbin-rule-store"

# OS-specific config directory:
# - macOS: ~/Library/Application Support/casbin-rule-store/
# - Linux: ~/.config/casbin-rule-store/
# - Windows: %APPDATA%\casbin-rule-store\
CONFIG_DIR: str = user_config_dir(APP_NAME)
CONFIG_FILENAME: str = "casbin_rule_store_config.json"

# Logger names
SYSTEM_LOGGER_NAME: str = "casbin-rule-store.system"
CASBIN_LOGGER_NAME: str = "casbin"

# Loggers pycasbin disables on every Enforcer construction unless logging is on
CASBIN_COMPONENT_LOGGER_NAMES: tuple[str, ...] = ("casbin.enforcer", "casbin.policy", "casbin.role")
