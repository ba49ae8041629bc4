"""Generate GraphQL SDL and resolver modules from a Prisma DMMF document."""

__version__ = "0.1.0"
