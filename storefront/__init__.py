"""
Storefront service: session handling and GraphQL orchestration on top of
the Shopify Storefront API.
"""

__version__ = "1.0.0"
