# Supabase table: skincare_products (name configurable via PRODUCTS_TABLE)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

skincare_products:
- id: uuid or text (primary key)
- name: text (not null)
- description: text (nullable)
- price: numeric (not null)
- category: text (nullable) - stored trimmed
- image_url: text (nullable) - relative path, leading "/" removed on read
- created_at: timestamp (default: now())
"""
