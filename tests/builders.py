"""Record builders shared by the test modules."""

from decimal import Decimal

from strata_kernel.domain.records import IC_PAYABLE, IC_RECEIVABLE, Entity, TransactionRow


def make_entity(
    entity_id: str,
    name: str | None = None,
    parent: str | None = None,
    type: str = "Operating",
    region: str = "",
    currency: str = "USD",
) -> Entity:
    return Entity(
        id=entity_id,
        name=name if name is not None else f"{entity_id} Ltd",
        parent=parent,
        type=type,
        region=region,
        currency=currency,
    )


def receivable(
    entity: str,
    counterparty: str,
    amount: str | int,
    currency: str = "USD",
    description: str = "IC Receivable - Revenue",
) -> TransactionRow:
    return TransactionRow(
        entity=entity,
        counterparty=counterparty,
        description=description,
        type=IC_RECEIVABLE,
        amount=Decimal(str(amount)),
        currency=currency,
    )


def payable(
    entity: str,
    counterparty: str,
    amount: str | int,
    currency: str = "USD",
    description: str = "IC Payable - Revenue",
) -> TransactionRow:
    return TransactionRow(
        entity=entity,
        counterparty=counterparty,
        description=description,
        type=IC_PAYABLE,
        amount=Decimal(str(amount)),
        currency=currency,
    )
