SEARCH_PRODUCTS = """
query SearchProducts($term: String!, $take: Int, $skip: Int) {
  search(input: { term: $term, take: $take, skip: $skip, groupByProduct: false }) {
    totalItems
    items {
      productId
      productName
      slug
      description
      currencyCode
      priceWithTax {
        ... on SinglePrice { value }
        ... on PriceRange { min max }
      }
      productAsset { id preview }
      productVariantId
      productVariantName
      sku
    }
  }
}
"""

_PRODUCT_FIELDS = """
    id
    name
    slug
    description
    variants { id name sku priceWithTax currencyCode stockLevel }
    featuredAsset { preview }
    assets { preview }
"""

GET_PRODUCT_BY_ID = f"""
query GetProductById($id: ID!) {{
  product(id: $id) {{{_PRODUCT_FIELDS}  }}
}}
"""

GET_PRODUCT_BY_SLUG = f"""
query GetProduct($slug: String!) {{
  product(slug: $slug) {{{_PRODUCT_FIELDS}  }}
}}
"""

_ORDER_FIELDS = """
      id
      code
      state
      currencyCode
      totalWithTax
      subTotalWithTax
      shippingWithTax
      lines {
        id
        quantity
        linePriceWithTax
        productVariant { id name sku priceWithTax }
      }
"""

ADD_ITEM_TO_ORDER = f"""
mutation AddItemToOrder($productVariantId: ID!, $quantity: Int!) {{
  addItemToOrder(productVariantId: $productVariantId, quantity: $quantity) {{
    __typename
    ... on Order {{{_ORDER_FIELDS}    }}
    ... on ErrorResult {{ errorCode message }}
  }}
}}
"""

GET_ACTIVE_ORDER = f"""
query GetActiveOrder {{
  activeOrder {{{_ORDER_FIELDS}
    customer {{ id emailAddress }}
    shippingLines {{ shippingMethod {{ id name }} priceWithTax }}
  }}
}}
"""

SET_CUSTOMER = """
mutation SetCustomerForOrder($input: CreateCustomerInput!) {
  setCustomerForOrder(input: $input) {
    __typename
    ... on Order { id }
    ... on ErrorResult { errorCode message }
  }
}
"""

SET_SHIPPING_ADDRESS = """
mutation SetShippingAddress($input: CreateAddressInput!) {
  setOrderShippingAddress(input: $input) {
    __typename
    ... on Order { id }
    ... on ErrorResult { errorCode message }
  }
}
"""

GET_SHIPPING_METHODS = """
query GetShippingMethods {
  eligibleShippingMethods { id name description price priceWithTax metadata }
}
"""

SET_SHIPPING_METHOD = """
mutation SetShippingMethod($shippingMethodId: [ID!]!) {
  setOrderShippingMethod(shippingMethodId: $shippingMethodId) {
    __typename
    ... on Order { id shippingWithTax totalWithTax }
    ... on ErrorResult { errorCode message }
  }
}
"""

TRANSITION_TO_ARRANGING_PAYMENT = """
mutation TransitionToArrangingPayment {
  transitionOrderToState(state: "ArrangingPayment") {
    __typename
    ... on Order { id state totalWithTax }
    ... on OrderStateTransitionError { errorCode message transitionError }
  }
}
"""

ADD_PAYMENT = f"""
mutation AddPaymentToOrder($input: PaymentInput!) {{
  addPaymentToOrder(input: $input) {{
    __typename
    ... on Order {{{_ORDER_FIELDS}    }}
    ... on ErrorResult {{ errorCode message }}
  }}
}}
"""

ACTIVE_CHANNEL = """
query ActiveChannel {
  activeChannel { id code currencyCode defaultLanguageCode }
}
"""
