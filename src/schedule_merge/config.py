from __future__ import annotations

# Formato de entrada/salida de fechas
DT_FORMAT = "%d/%m/%Y - %H:%M"

# Politica por defecto: descartar el evento menos deseable en conflicto
DEFAULT_TRIM_OVERLAPS = False

POLICY_NAMES = {
    False: "discard",
    True: "trim",
}

LOGGER_NAME = "schedule_merge"
