"""
utils — enums, errors, schemas, validators and small helpers.
"""
