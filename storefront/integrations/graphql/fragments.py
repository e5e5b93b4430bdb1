ADDRESS_FRAGMENT = """
  fragment address on MailingAddress {
    id
    address1
    address2
    city
    company
    country
    firstName
    lastName
    phone
    province
    zip
  }
"""

CUSTOMER_FRAGMENT = """
  fragment customer on Customer {
    id
    firstName
    lastName
    displayName
    email
    phone
    acceptsMarketing
    createdAt
    defaultAddress {
      ...address
    }
    addresses(first: 10) {
      edges {
        node {
          ...address
        }
      }
    }
    orders(first: 5) {
      edges {
        node {
          id
          orderNumber
          processedAt
          financialStatus
          fulfillmentStatus
          currentTotalPrice {
            amount
            currencyCode
          }
          lineItems(first: 5) {
            edges {
              node {
                title
                quantity
                variant {
                  id
                  title
                  image {
                    url
                    altText
                    width
                    height
                  }
                  price {
                    amount
                    currencyCode
                  }
                }
              }
            }
          }
        }
      }
    }
  }
""" + ADDRESS_FRAGMENT

IMAGE_FRAGMENT = """
  fragment image on Image {
    url
    altText
    width
    height
  }
"""

SEO_FRAGMENT = """
  fragment seo on SEO {
    description
    title
  }
"""

PRODUCT_FRAGMENT = """
  fragment product on Product {
    id
    handle
    availableForSale
    title
    description
    descriptionHtml
    options {
      id
      name
      values
    }
    priceRange {
      maxVariantPrice {
        amount
        currencyCode
      }
      minVariantPrice {
        amount
        currencyCode
      }
    }
    variants(first: 250) {
      edges {
        node {
          id
          title
          availableForSale
          selectedOptions {
            name
            value
          }
          price {
            amount
            currencyCode
          }
        }
      }
    }
    featuredImage {
      ...image
    }
    images(first: 20) {
      edges {
        node {
          ...image
        }
      }
    }
    seo {
      ...seo
    }
    tags
    updatedAt
  }
""" + IMAGE_FRAGMENT + SEO_FRAGMENT

CART_FRAGMENT = """
  fragment cart on Cart {
    id
    checkoutUrl
    cost {
      subtotalAmount {
        amount
        currencyCode
      }
      totalAmount {
        amount
        currencyCode
      }
      totalTaxAmount {
        amount
        currencyCode
      }
    }
    lines(first: 100) {
      edges {
        node {
          id
          quantity
          cost {
            totalAmount {
              amount
              currencyCode
            }
          }
          merchandise {
            ... on ProductVariant {
              id
              title
              selectedOptions {
                name
                value
              }
              product {
                ...product
              }
            }
          }
        }
      }
    }
    totalQuantity
  }
""" + PRODUCT_FRAGMENT

COLLECTION_FRAGMENT = """
  fragment collection on Collection {
    handle
    title
    description
    seo {
      ...seo
    }
    updatedAt
  }
""" + SEO_FRAGMENT
