"""
Named calculation methods. Each one is a CalculationMethod value; adding a method is
adding an entry to METHODS, no code change in the calculator.
"""

from dataclasses import replace

from models import AsrShadow, CalculationMethod, HighLatitudeRule, UnknownMethodError

MUSLIM_WORLD_LEAGUE = CalculationMethod(
    name="MuslimWorldLeague",
    fajr_angle=18.0,
    isha_angle=17.0,
    asr_shadow=AsrShadow.STANDARD,
    high_latitude_rule=HighLatitudeRule.MIDDLE_OF_NIGHT,
)

KARACHI = CalculationMethod(name="Karachi", fajr_angle=18.0, isha_angle=18.0)

EGYPTIAN = CalculationMethod(name="Egyptian", fajr_angle=19.5, isha_angle=17.5)

NORTH_AMERICA = CalculationMethod(name="NorthAmerica", fajr_angle=15.0, isha_angle=15.0)

# Isha is a fixed 90 minutes after Maghrib (120 during Ramadan in Makkah)
UMM_AL_QURA = CalculationMethod(name="UmmAlQura", fajr_angle=18.5, isha_interval=90)

# Diyanet angles as used by the Turkish service
TURKEY = CalculationMethod(name="Turkey", fajr_angle=18.0, isha_angle=17.0)

METHODS: dict[str, CalculationMethod] = {
    m.name: m
    for m in (MUSLIM_WORLD_LEAGUE, KARACHI, EGYPTIAN, NORTH_AMERICA, UMM_AL_QURA, TURKEY)
}


def get_method(name: str, asr_shadow: AsrShadow | None = None) -> CalculationMethod:
    """Look up a method by name (case-insensitive), optionally overriding the Asr rule."""
    for key, method in METHODS.items():
        if key.lower() == name.lower():
            break
    else:
        raise UnknownMethodError(f"Unknown calculation method: {name}")
    if asr_shadow is not None and asr_shadow != method.asr_shadow:
        method = replace(method, asr_shadow=asr_shadow)
    return method
