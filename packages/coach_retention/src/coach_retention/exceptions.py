"""Exception hierarchy for coach_retention."""


class RetentionError(Exception):
    """Base exception for all coach_retention errors."""


class ConfigError(RetentionError):
    """Invalid or missing configuration."""


class DataLoadError(RetentionError):
    """Failed to load or parse the roster file."""


class ColumnMismatchError(DataLoadError):
    """Required columns missing from the roster."""

    def __init__(self, missing: set[str], available: set[str]) -> None:
        self.missing = missing
        self.available = available
        super().__init__(f"Missing required columns: {sorted(missing)}")


class ContractError(RetentionError, ValueError):
    """A caller passed a value outside the engine's contract."""


class DisciplineError(ContractError):
    """Unknown discipline tag."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Unknown discipline {value!r}; expected one of: primary, secondary, combined"
        )
