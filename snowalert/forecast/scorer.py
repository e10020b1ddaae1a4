"""Effective snow probability from daily precipitation, temperature and snowfall."""

FREEZING_TEMP_C = 2.0  # ~35°F
SNOW_PROBABILITY_THRESHOLD = 20
SNOWFALL_OVERRIDE_PROBABILITY = 100


def score(precip_prob: int, min_temp_c: float, snowfall_cm: float) -> int:
    """Compute the effective snow probability for one day.

    Args:
        precip_prob: Max precipitation probability for the day (0-100).
        min_temp_c: Minimum temperature in Celsius.
        snowfall_cm: Forecast snowfall sum in centimetres.

    Returns:
        100 if any snowfall is forecast, the precipitation probability if the
        day drops below freezing, otherwise 0.
    """
    if snowfall_cm > 0:
        return SNOWFALL_OVERRIDE_PROBABILITY
    if min_temp_c < FREEZING_TEMP_C:
        return precip_prob
    return 0


def is_snow_day(precip_prob: int, min_temp_c: float, snowfall_cm: float) -> bool:
    """Direct snowfall, or likely precipitation with freezing temperatures."""
    return snowfall_cm > 0 or (
        precip_prob > SNOW_PROBABILITY_THRESHOLD and min_temp_c < FREEZING_TEMP_C
    )
