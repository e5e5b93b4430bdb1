"""
Integrations with the Shopify Storefront API.

- clients/real_http: the GraphQL transport (the only place HTTP calls to Shopify are made)
- contracts: response and error shapes
- graphql: query and mutation documents
- policy: services and response reshaping built on the transport
"""
