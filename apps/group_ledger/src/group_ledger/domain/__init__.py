"""Pure domain rules: money, periods, errors and the settlement engine."""
