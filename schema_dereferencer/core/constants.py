"""OpenAPI schema keywords understood by the schema codec."""

# Reference keywords
REF_FIELD = "$ref"
COMPONENTS_SCHEMAS_PREFIX = "#/components/schemas/"

# Composition keywords
ALL_OF_FIELD = "allOf"
ONE_OF_FIELD = "oneOf"
ANY_OF_FIELD = "anyOf"
NOT_FIELD = "not"

# Primitive type names
BOOLEAN_TYPE = "boolean"
OBJECT_TYPE = "object"
ARRAY_TYPE = "array"
NUMBER_TYPE = "number"
INTEGER_TYPE = "integer"
STRING_TYPE = "string"
