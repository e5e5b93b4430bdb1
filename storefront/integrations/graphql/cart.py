from .fragments import CART_FRAGMENT

GET_CART_QUERY = """
  query getCart($cartId: ID!) {
    cart(id: $cartId) {
      ...cart
    }
  }
""" + CART_FRAGMENT

CREATE_CART_MUTATION = """
  mutation createCart($lineItems: [CartLineInput!]) {
    cartCreate(input: { lines: $lineItems }) {
      cart {
        ...cart
      }
    }
  }
""" + CART_FRAGMENT

ADD_TO_CART_MUTATION = """
  mutation addToCart($cartId: ID!, $lines: [CartLineInput!]!) {
    cartLinesAdd(cartId: $cartId, lines: $lines) {
      cart {
        ...cart
      }
    }
  }
""" + CART_FRAGMENT

EDIT_CART_ITEMS_MUTATION = """
  mutation editCartItems($cartId: ID!, $lines: [CartLineUpdateInput!]!) {
    cartLinesUpdate(cartId: $cartId, lines: $lines) {
      cart {
        ...cart
      }
    }
  }
""" + CART_FRAGMENT

REMOVE_FROM_CART_MUTATION = """
  mutation removeFromCart($cartId: ID!, $lineIds: [ID!]!) {
    cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {
      cart {
        ...cart
      }
    }
  }
""" + CART_FRAGMENT
