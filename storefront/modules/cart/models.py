# Client local storage key: cart
# This file documents the persisted layout
# Actual operations are handled in service.py

"""
Expected client storage layout (JSON value):

cart: list of
- id: text (product id, unique within the cart)
- name: text
- price: number
- quantity: integer (1..999)
- image: text
- image_url: text (nullable)
- volume: text (category or variant label)
"""
