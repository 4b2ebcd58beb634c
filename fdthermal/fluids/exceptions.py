class CoolPropError(Exception):
    """CoolProp could not determine the state of the gas."""
    pass
