"""
CRUD convention helpers.
Maps abstract operation kinds to Prisma catalog names, required input types
and the client calls used in generated resolver bodies.
"""

QUERY_KINDS = ("findUnique", "findMany", "findFirst", "count", "aggregate", "groupBy")

MUTATION_KINDS = (
    "create", "createMany", "update", "updateMany", "upsert", "delete", "deleteMany",
)

OPERATION_KINDS = QUERY_KINDS + MUTATION_KINDS

# Operation kind -> prefix of the root field in the DMMF (e.g. createOneEmployee)
OPERATION_PRISMA_FUNC = {
    "findUnique": "findUnique",
    "findMany": "findMany",
    "findFirst": "findFirst",
    "count": "count",
    "aggregate": "aggregate",
    "groupBy": "groupBy",
    "create": "createOne",
    "createMany": "createMany",
    "update": "updateOne",
    "updateMany": "updateMany",
    "upsert": "upsertOne",
    "delete": "deleteOne",
    "deleteMany": "deleteMany",
}

# Operation kind -> input types it needs ({model} is the entity name)
OPERATION_INPUT_TYPES = {
    "findUnique": ("{model}WhereUniqueInput",),
    "findMany": ("{model}WhereInput", "{model}OrderByWithRelationInput"),
    "findFirst": ("{model}WhereInput", "{model}OrderByWithRelationInput"),
    "count": ("{model}WhereInput",),
    "aggregate": ("{model}WhereInput", "{model}OrderByWithRelationInput"),
    "groupBy": (
        "{model}WhereInput",
        "{model}OrderByWithAggregationInput",
        "{model}ScalarWhereWithAggregatesInput",
    ),
    "create": ("{model}CreateInput",),
    "createMany": ("{model}CreateManyInput",),
    "update": ("{model}WhereUniqueInput", "{model}UpdateInput"),
    "updateMany": ("{model}WhereInput", "{model}UpdateManyMutationInput"),
    "upsert": ("{model}WhereUniqueInput", "{model}CreateInput", "{model}UpdateInput"),
    "delete": ("{model}WhereUniqueInput",),
    "deleteMany": ("{model}WhereInput",),
}

# Operation kind -> (client method, [(keyword, GraphQL argument)])
# A tuple of arguments in place of a single name builds a nested dict.
OPERATION_CLIENT_CALLS = {
    "findUnique": ("find_unique", [("where", "where")]),
    "findMany": ("find_many", [("where", "where"), ("order", "orderBy"), ("take", "take"), ("skip", "skip")]),
    "findFirst": ("find_first", [("where", "where"), ("order", "orderBy"), ("skip", "skip")]),
    "count": ("count", [("where", "where")]),
    "aggregate": ("aggregate", [("where", "where")]),
    "groupBy": ("group_by", [("by", "by"), ("where", "where")]),
    "create": ("create", [("data", "data")]),
    "createMany": ("create_many", [("data", "data")]),
    "update": ("update", [("where", "where"), ("data", "data")]),
    "updateMany": ("update_many", [("where", "where"), ("data", "data")]),
    "upsert": ("upsert", [("where", "where"), ("data", ("create", "update"))]),
    "delete": ("delete", [("where", "where")]),
    "deleteMany": ("delete_many", [("where", "where")]),
}


def get_operation_root(operation):
    """Root type holding the operation's field: "Query" or "Mutation"."""
    return "Mutation" if operation in MUTATION_KINDS else "Query"


def get_prisma_func(operation):
    """Catalog prefix for an operation kind; "" for unknown kinds."""
    return OPERATION_PRISMA_FUNC.get(operation, "")


def get_operation_input_types(operation, model_name):
    """Input type names an operation needs for *model_name*."""
    return [name.format(model=model_name) for name in OPERATION_INPUT_TYPES.get(operation, ())]


def get_client_call(operation):
    """(method, kwargs) for the resolver body, or None for unknown kinds."""
    return OPERATION_CLIENT_CALLS.get(operation)


def is_many_operation(operation):
    """Operations named with the plural entity name (findMany, createMany, ...)."""
    return "Many" in operation
