"""Brand catalogs, products, variants and per-product attribute schemas

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_brands_user_id", "brands", ["user_id"])

    op.create_table(
        "product_catalogs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("catalog_id", sa.String(64), nullable=False, unique=True),
        sa.Column("brand_id", sa.Integer(), sa.ForeignKey("brands.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("settings", JSONB(), nullable=True),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_product_catalogs_brand_id", "product_catalogs", ["brand_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "catalog_id", sa.String(64),
            sa.ForeignKey("product_catalogs.catalog_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.String(), server_default="", nullable=False),
        sa.Column("base_attributes", JSONB(), server_default="{}", nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_catalog_id", "products", ["catalog_id"])

    op.create_table(
        "product_variants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("attributes", JSONB(), server_default="{}", nullable=False),
        sa.Column("inventory_count", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_product_variants_product_id", "product_variants", ["product_id"])
    op.create_index(
        "ix_product_variants_attributes_gin", "product_variants", ["attributes"], postgresql_using="gin",
    )

    op.create_table(
        "product_attribute_schemas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("attribute_key", sa.String(100), nullable=False),
        sa.Column("attribute_label", sa.String(255), nullable=False),
        sa.Column("attribute_type", sa.String(20), nullable=False),
        sa.Column("options", JSONB(), server_default="[]", nullable=True),
        sa.Column("default_value", JSONB(), nullable=True),
        sa.Column("is_required", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("is_variant_defining", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("validation_rules", JSONB(), server_default="{}", nullable=True),
        sa.Column("help_text", sa.String(), nullable=True),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("product_id", "attribute_key", name="uq_product_attribute_schemas_product_key"),
    )
    op.create_index(
        "ix_product_attribute_schemas_product_sort",
        "product_attribute_schemas",
        ["product_id", "sort_order"],
    )

    # JSON Schema document describing a product's attributes
    op.execute("""
        CREATE OR REPLACE FUNCTION get_product_attribute_schema(p_product_id integer)
        RETURNS jsonb
        LANGUAGE sql STABLE AS $$
            SELECT jsonb_build_object(
                'type', 'object',
                'properties', COALESCE(
                    jsonb_object_agg(
                        s.attribute_key,
                        jsonb_strip_nulls(jsonb_build_object(
                            'title', s.attribute_label,
                            'type', CASE s.attribute_type
                                        WHEN 'number' THEN 'number'
                                        WHEN 'boolean' THEN 'boolean'
                                        ELSE 'string'
                                    END,
                            'enum', (
                                SELECT jsonb_agg(o -> 'value')
                                FROM jsonb_array_elements(COALESCE(s.options, '[]'::jsonb)) AS o
                            ),
                            'default', s.default_value,
                            'description', s.help_text
                        )) || COALESCE(s.validation_rules, '{}'::jsonb)
                    ) FILTER (WHERE s.id IS NOT NULL),
                    '{}'::jsonb
                ),
                'required', COALESCE(
                    jsonb_agg(s.attribute_key) FILTER (WHERE s.is_required),
                    '[]'::jsonb
                )
            )
            FROM product_attribute_schemas AS s
            WHERE s.product_id = p_product_id;
        $$;
    """)

    # Checks required keys, value kinds and option membership
    op.execute("""
        CREATE OR REPLACE FUNCTION validate_attribute_values(p_product_id integer, p_attribute_values jsonb)
        RETURNS boolean
        LANGUAGE plpgsql STABLE AS $$
        DECLARE
            s record;
            v jsonb;
        BEGIN
            FOR s IN
                SELECT * FROM product_attribute_schemas WHERE product_id = p_product_id
            LOOP
                v := p_attribute_values -> s.attribute_key;
                IF v IS NULL OR v = 'null'::jsonb THEN
                    IF s.is_required THEN
                        RETURN false;
                    END IF;
                    CONTINUE;
                END IF;

                IF s.attribute_type = 'number' AND jsonb_typeof(v) <> 'number' THEN
                    RETURN false;
                ELSIF s.attribute_type = 'boolean' AND jsonb_typeof(v) <> 'boolean' THEN
                    RETURN false;
                ELSIF s.attribute_type IN ('text', 'select', 'color') AND jsonb_typeof(v) <> 'string' THEN
                    RETURN false;
                END IF;

                IF s.attribute_type IN ('select', 'color')
                   AND jsonb_array_length(COALESCE(s.options, '[]'::jsonb)) > 0
                   AND NOT EXISTS (
                       SELECT 1 FROM jsonb_array_elements(s.options) AS o WHERE o -> 'value' = v
                   ) THEN
                    RETURN false;
                END IF;
            END LOOP;
            RETURN true;
        END;
        $$;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS validate_attribute_values(integer, jsonb);")
    op.execute("DROP FUNCTION IF EXISTS get_product_attribute_schema(integer);")
    op.drop_index("ix_product_attribute_schemas_product_sort", table_name="product_attribute_schemas")
    op.drop_table("product_attribute_schemas")
    op.drop_index("ix_product_variants_attributes_gin", table_name="product_variants")
    op.drop_index("ix_product_variants_product_id", table_name="product_variants")
    op.drop_table("product_variants")
    op.drop_index("ix_products_catalog_id", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_product_catalogs_brand_id", table_name="product_catalogs")
    op.drop_table("product_catalogs")
    op.drop_index("ix_brands_user_id", table_name="brands")
    op.drop_table("brands")
