class ExpenseRollupError(Exception):
    pass


class UnknownRangeError(ExpenseRollupError, KeyError):

    def __init__(self, range_id: str):
        super().__init__(range_id)
        self.range_id = range_id

    def __str__(self) -> str:
        return f"Unknown time range: {self.range_id!r}"


class EmptyBatchError(ExpenseRollupError):

    def __str__(self) -> str:
        return "Transaction batch has no valid dates to resolve a time range against"


class RangeConfigError(ExpenseRollupError, ValueError):
    pass
