"""
GraphQL documents sent to the Storefront API.

These strings are fixed contracts with the platform schema; change them only
together with the reshaping code that reads their results.
"""
