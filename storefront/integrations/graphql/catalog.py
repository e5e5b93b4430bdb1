from .fragments import COLLECTION_FRAGMENT, PRODUCT_FRAGMENT, SEO_FRAGMENT

GET_COLLECTION_QUERY = """
  query getCollection($handle: String!) {
    collection(handle: $handle) {
      ...collection
    }
  }
""" + COLLECTION_FRAGMENT

GET_COLLECTIONS_QUERY = """
  query getCollections {
    collections(first: 100, sortKey: TITLE) {
      edges {
        node {
          ...collection
        }
      }
    }
  }
""" + COLLECTION_FRAGMENT

GET_COLLECTION_PRODUCTS_QUERY = """
  query getCollectionProducts(
    $handle: String!
    $sortKey: ProductCollectionSortKeys
    $reverse: Boolean
  ) {
    collection(handle: $handle) {
      products(sortKey: $sortKey, reverse: $reverse, first: 100) {
        edges {
          node {
            ...product
          }
        }
      }
    }
  }
""" + PRODUCT_FRAGMENT

GET_PRODUCT_QUERY = """
  query getProduct($handle: String!) {
    product(handle: $handle) {
      ...product
    }
  }
""" + PRODUCT_FRAGMENT

GET_PRODUCTS_QUERY = """
  query getProducts($sortKey: ProductSortKeys, $reverse: Boolean, $query: String) {
    products(sortKey: $sortKey, reverse: $reverse, query: $query, first: 100) {
      edges {
        node {
          ...product
        }
      }
    }
  }
""" + PRODUCT_FRAGMENT

GET_PRODUCT_RECOMMENDATIONS_QUERY = """
  query getProductRecommendations($productId: ID!) {
    productRecommendations(productId: $productId) {
      ...product
    }
  }
""" + PRODUCT_FRAGMENT

GET_MENU_QUERY = """
  query getMenu($handle: String!) {
    menu(handle: $handle) {
      items {
        title
        url
      }
    }
  }
"""

PAGE_FRAGMENT = """
  fragment page on Page {
    ... on Page {
      id
      title
      handle
      body
      bodySummary
      seo {
        ...seo
      }
      createdAt
      updatedAt
    }
  }
""" + SEO_FRAGMENT

GET_PAGE_QUERY = """
  query getPage($handle: String!) {
    pageByHandle(handle: $handle) {
      ...page
    }
  }
""" + PAGE_FRAGMENT

GET_PAGES_QUERY = """
  query getPages {
    pages(first: 100) {
      edges {
        node {
          ...page
        }
      }
    }
  }
""" + PAGE_FRAGMENT
