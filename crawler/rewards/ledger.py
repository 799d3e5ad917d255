"""
Ledger module for the simulator.

Holds the balances of the five currencies. Credits and debits return a new
Economy; a debit that would go negative raises before anything changes.
"""

from pydantic import BaseModel, Field

from crawler.core.constants import Currency
from crawler.core.errors import InsufficientResource


class Economy(BaseModel):
    """The balances of a player across every currency."""

    balances: dict[Currency, int] = Field(
        default_factory=lambda: {currency: 0 for currency in Currency},
        description="Balance of each currency, never negative.",
    )

    def model_post_init(self, _) -> None:
        for currency in Currency:
            self.balances.setdefault(currency, 0)
        for currency, amount in self.balances.items():
            if amount < 0:
                raise ValueError(f"Negative {currency.value} balance: {amount}")

    def balance(self, currency: Currency) -> int:
        return self.balances.get(currency, 0)

    @property
    def gold(self) -> int:
        return self.balance(Currency.GOLD)

    def credit(self, currency: Currency, amount: int) -> "Economy":
        """
        Adds `amount` to a balance.

        Args:
            currency (Currency): The balance to credit.
            amount (int): A non-negative amount.

        Returns:
            Economy: The updated ledger.

        """
        if amount < 0:
            raise ValueError(f"Cannot credit a negative amount: {amount}")
        balances = dict(self.balances)
        balances[currency] = balances.get(currency, 0) + amount
        return Economy(balances=balances)

    def debit(self, currency: Currency, amount: int) -> "Economy":
        """
        Removes `amount` from a balance.

        Args:
            currency (Currency): The balance to debit.
            amount (int): A non-negative amount.

        Returns:
            Economy: The updated ledger.

        Raises:
            InsufficientResource: If the balance is lower than `amount`.

        """
        if amount < 0:
            raise ValueError(f"Cannot debit a negative amount: {amount}")
        available = self.balance(currency)
        if available < amount:
            raise InsufficientResource(currency.value, amount, available)
        balances = dict(self.balances)
        balances[currency] = available - amount
        return Economy(balances=balances)
