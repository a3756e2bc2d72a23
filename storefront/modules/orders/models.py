# Shared local storage key: orders
# This file documents the persisted layout
# Actual operations are handled in service.py

"""
Expected shared storage layout (JSON value):

orders: list of
- order_id: text ("ORD-<unix-ms>")
- user_id: text (references registered_users.id)
- customer_name: text
- customer_email: text
- order_date: ISO-8601 timestamp
- status: text ("pending" on creation)
- items: list of {product_id, product_name, quantity, price, image_url}
- subtotal, shipping_cost, total_amount: number
- shipping_address: {full_name, first_name, last_name, email, phone,
                     address, city, postal_code, country}
- payment_method: text ("card" | "cash")

Card details are validated at checkout and never stored.
"""
