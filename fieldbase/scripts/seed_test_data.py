"""
Seed Test Data Script
Creates a demo "Products" table (4 fields, 5 records) in the first workspace.
Run with: python -m fieldbase.scripts.seed_test_data
Requires SUPABASE_SERVICE_ROLE_KEY, since it writes outside any user session.
"""

import sys
import logging
from typing import Dict, List

from fieldbase.database.supabase_client import SupabaseClient
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CATEGORY_CHOICES = [
    {"id": "cat-1", "label": "Electronics", "color": "blue"},
    {"id": "cat-2", "label": "Clothing", "color": "purple"},
    {"id": "cat-3", "label": "Books", "color": "green"},
    {"id": "cat-4", "label": "Food", "color": "yellow"},
]

FIELDS = [
    {"name": "Product Name", "type": "text", "options": {}},
    {"name": "Price", "type": "number", "options": {}},
    {"name": "Category", "type": "select", "options": {"choices": CATEGORY_CHOICES}},
    {"name": "In Stock", "type": "boolean", "options": {}},
]

# (Product Name, Price, Category, In Stock)
PRODUCTS = [
    ("MacBook Pro", 2499, "cat-1", True),
    ("T-Shirt Blue", 29.99, "cat-2", True),
    ("JavaScript Guide", 39.99, "cat-3", False),
    ("Organic Coffee", 12.99, "cat-4", True),
    ("Wireless Mouse", 79.99, "cat-1", True),
]


def get_first_workspace(supabase: Client) -> Dict:
    result = supabase.table("organizations")\
        .select("id, name")\
        .order("created_at", desc=False)\
        .limit(1)\
        .execute()
    if not result.data:
        raise RuntimeError("No organization found; create a workspace first")
    return result.data[0]


def seed_table(supabase: Client, workspace_id: str) -> str:
    result = supabase.table("entity_tables").insert({
        "workspace_id": workspace_id,
        "name": "Products",
        "description": "Demo table with products",
    }).execute()
    table_id = result.data[0]["id"]
    logger.info(f"Created table Products ({table_id})")
    return table_id


def seed_fields(supabase: Client, table_id: str) -> Dict[str, str]:
    """Insert the fields in column order; returns field name -> field id"""
    rows = [
        {**field, "table_id": table_id, "order_index": index}
        for index, field in enumerate(FIELDS)
    ]
    result = supabase.table("entity_fields").insert(rows).execute()
    for field in result.data:
        logger.debug(f"Created field: {field['name']} (index {field['order_index']})")
    logger.info(f"Created {len(result.data)} fields")
    return {field["name"]: field["id"] for field in result.data}


def seed_records(supabase: Client, table_id: str, field_ids: Dict[str, str]) -> List[Dict]:
    rows = [
        {
            "table_id": table_id,
            "data": {
                field_ids["Product Name"]: name,
                field_ids["Price"]: price,
                field_ids["Category"]: category,
                field_ids["In Stock"]: in_stock,
            },
        }
        for name, price, category, in_stock in PRODUCTS
    ]
    result = supabase.table("entity_records").insert(rows).execute()
    logger.info(f"Created {len(result.data)} records")
    return result.data


def seed(supabase: Client) -> str:
    workspace = get_first_workspace(supabase)
    logger.info(f"Seeding workspace {workspace['name']} ({workspace['id']})")
    table_id = seed_table(supabase, workspace["id"])
    field_ids = seed_fields(supabase, table_id)
    seed_records(supabase, table_id, field_ids)
    return table_id


def main():
    """Main function to seed the demo table"""
    try:
        table_id = seed(SupabaseClient.get_service_client())
        logger.info(f"Seeding completed successfully! Open /dashboard/tables/{table_id}")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
