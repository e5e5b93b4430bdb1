"""Shared constants for the storefront service."""

SHOPIFY_GRAPHQL_API_ENDPOINT = "/api/2023-01/graphql.json"
SHOPIFY_ACCESS_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"

# Products carrying this tag are hidden from listings.
HIDDEN_PRODUCT_TAG = "nextjs-frontend-hidden"

# Cache tags
COLLECTIONS_TAG = "collections"
PRODUCTS_TAG = "products"

COLLECTION_WEBHOOKS = ("collections/create", "collections/delete", "collections/update")
PRODUCT_WEBHOOKS = ("products/create", "products/delete", "products/update")

CUSTOMER_ACCESS_TOKEN_COOKIE = "customerAccessToken"
CART_ID_COOKIE = "cartId"
