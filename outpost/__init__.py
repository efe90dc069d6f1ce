"""
Outpost - Colony Logistics Turn Engine

Turn-based economy core for a colony game:
- Sectors of nodes sharing pooled stockpiles
- Construction catalog (cost, upkeep, output, cooldown)
- Deterministic end-turn resolution producing an ordered action log
- Ship travel that rewires the sector graph
- Food upkeep and victory thresholds
"""
__version__ = "0.1.0"
