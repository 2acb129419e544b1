RULES_INFO = """
### BATTLEFIELD
- Square grid addressed by (x, y). Range is straight-line distance.
- "Adjacent" means the 8 surrounding hexes; a shared hex is never adjacent.
- Terrain: clear, light/heavy woods, water, rough, road. Woods, water and rough ground make
  targets harder to hit and slow most units; roads speed ground units up.

### TURN STRUCTURE
Each round runs INITIATIVE -> MOVEMENT -> COMBAT -> END. The initiative winner acts first
in MOVEMENT and COMBAT. You are asked for orders once per side per MOVEMENT and COMBAT phase.

### MOVEMENT (MOVEMENT phase only, once per unit)
- walk: costs 1 heat for mechs. run: 2 heat. jump: ignores terrain, costs heat.
- A unit may not end on an occupied hex (anti-mech infantry may share a hex with an enemy).
- VTOLs may set an elevation 1-6.

### COMBAT (COMBAT phase only, one attack per unit)
- FIRE: hit when 2d6 + skill meets the target number. Target number rises with range band
  (short/medium/long/extreme), target movement, cover and your heat.
  Set indirect=true only for units with indirect fire. overheat=true adds damage heat +2.
- MELEE: target must be adjacent. Variants: standard, punch, kick, charge, push, weapon,
  death_from_above (needs jump, target within jump range), and extended variants
  advanced_punch, advanced_kick, shoulder_check, head_butt, body_slam, trip, grapple, stomp,
  advanced_charge. defensive_stance needs no target.
- ANTI_VEHICLE: anti-mech infantry only: leg_attack, swarm (10+ troops), mine (needs mines),
  demo_charge (needs demo charges). Mines and demo work from the same or an adjacent hex.

### HEAT (mechs)
Heat above the safe level slows the mech and worsens its aim; a mech at its heat cap may shut
down. A shut-down mech can only attempt STARTUP.

### VICTORY
Destroy every enemy unit. If both sides are wiped out at once the game is a draw.
"""
