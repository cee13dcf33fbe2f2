"""initial schema: persons, product, transactions, transaction_lines"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


PAYMENT_METHODS = (
    "cash", "credit_card", "bank_transfer", "check", "credit_line", "debit_card", "digital_wallet",
)


def _in_list(column: str, values) -> str:
    return f"{column} IN (" + ",".join(f"'{v}'" for v in values) + ")"


def upgrade() -> None:
    op.create_table(
        "persons",
        sa.Column("rut", sa.String(20), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("lastname", sa.String(120)),
        sa.Column("beneficiaryid", sa.Integer()),
        sa.PrimaryKeyConstraint("rut", name="pk_persons"),
    )

    op.create_table(
        "product",
        sa.Column("productid", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500)),
        sa.Column("measure", sa.String(50), nullable=False),
        sa.Column("type", sa.String(80), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("productid", name="pk_product"),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column("rut", sa.String(20), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.String(1000)),
        sa.Column("kind", sa.String(10), nullable=False, server_default="purchase"),
        sa.Column("counterparty_id", sa.String(64)),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_transactions"),
        sa.ForeignKeyConstraint(["rut"], ["persons.rut"], name="fk_transactions_rut_persons"),
        sa.CheckConstraint(_in_list("payment_method", PAYMENT_METHODS), name="ck_transactions_payment_method"),
        sa.CheckConstraint("kind IN ('sale','purchase')", name="ck_transactions_kind"),
        sa.CheckConstraint("total_amount >= 0", name="ck_transactions_total_amount_non_negative"),
    )
    op.create_index("ix_transactions_transaction_date", "transactions", ["transaction_date"])
    op.create_index("ix_transactions_rut", "transactions", ["rut"])
    op.create_index("ix_transactions_counterparty_id", "transactions", ["counterparty_id"])
    op.create_index("ix_transactions_kind_date", "transactions", ["kind", "transaction_date"])

    op.create_table(
        "transaction_lines",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("transaction_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_transaction_lines"),
        sa.ForeignKeyConstraint(
            ["transaction_id"], ["transactions.id"],
            name="fk_transaction_lines_transaction_id_transactions", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["product_id"], ["product.productid"], name="fk_transaction_lines_product_id_product",
        ),
        sa.CheckConstraint("quantity > 0", name="ck_transaction_lines_quantity_positive"),
    )
    op.create_index("ix_transaction_lines_transaction_id", "transaction_lines", ["transaction_id"])


def downgrade() -> None:
    op.drop_index("ix_transaction_lines_transaction_id", table_name="transaction_lines")
    op.drop_table("transaction_lines")
    op.drop_index("ix_transactions_kind_date", table_name="transactions")
    op.drop_index("ix_transactions_counterparty_id", table_name="transactions")
    op.drop_index("ix_transactions_rut", table_name="transactions")
    op.drop_index("ix_transactions_transaction_date", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("product")
    op.drop_table("persons")
