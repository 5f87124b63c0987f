from enum import Enum

class FieldType(str, Enum):
    BOOLEAN = "boolean"
    STRING = "string"

class EffectType(str, Enum):
    SET_JINJA_VARIABLE = "setJinjaVariable"
    PREPEND_SYSTEM_PROMPT = "prependSystemPrompt"
    APPEND_SYSTEM_PROMPT = "appendSystemPrompt"

class ConditionType(str, Enum):
    EQUALS = "equals"

MIXED = "mixed"

STACK_DIR_NAME = ".vmodels"
SETTINGS_FILE = "settings.yaml"
CATALOG_DIR = "catalog"
CATALOG_SUFFIXES = (".yaml", ".yml", ".json")

DEFAULTS = {
    "MAX_CHAIN_DEPTH": 32,
    "LOOKUP_TIMEOUT_SEC": 10.0,
    "LOG_LEVEL": "WARN",
    "MAX_TAG_LENGTH": 100,
}
