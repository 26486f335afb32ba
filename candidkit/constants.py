"""Candid type names, numeric ranges and toolkit defaults."""

TEXT_TYPES = {"text"}
PRINCIPAL_TYPES = {"principal"}
BOOL_TYPES = {"bool"}
NULL_TYPES = {"null"}
FLOAT_TYPES = {"float32", "float64"}
BIG_INT_TYPES = {"nat", "int"}
PERMISSIVE_TYPES = {"reserved", "empty"}

# Inclusive bounds for the fixed-width integer types.
INT_RANGES = {
    "nat8": (0, 2**8 - 1),
    "nat16": (0, 2**16 - 1),
    "nat32": (0, 2**32 - 1),
    "nat64": (0, 2**64 - 1),
    "int8": (-(2**7), 2**7 - 1),
    "int16": (-(2**15), 2**15 - 1),
    "int32": (-(2**31), 2**31 - 1),
    "int64": (-(2**63), 2**63 - 1),
}

PRIMITIVE_TYPES = (
    TEXT_TYPES
    | PRINCIPAL_TYPES
    | BOOL_TYPES
    | NULL_TYPES
    | FLOAT_TYPES
    | BIG_INT_TYPES
    | PERMISSIVE_TYPES
    | set(INT_RANGES)
)

# Type constructors that take a body or an inner type.
CONSTRUCTORS = {"opt", "vec", "record", "variant", "func", "service"}
BLOB_TYPE = "blob"

FUNC_MODES = {"query", "composite_query", "oneway"}

DEFAULT_MAX_DEPTH = 32
# Longest alias expansion kept, in characters.
DEFAULT_MAX_LENGTH = 64 * 1024
DEFAULT_EXAMPLE_TEXT = "example"
# ICP ledger canister.
DEFAULT_EXAMPLE_PRINCIPAL = "ryjl3-tyaaa-aaaaa-aaaba-cai"
DEFAULT_JSON_INDENT = 2

ROOT_PATH = "(root)"
