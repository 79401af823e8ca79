"""
Mount Policy service package.

Decides whether an actor may mount a shared vehicle, based on a per-vehicle-type
rule table and the vehicle's current occupants. It provides:

- app.rules: Rule model, first-match evaluator and the atomically swapped table.
- app.persistence: Versioned JSON storage for the rule table.
- app.hooks: The synchronous gate the host calls on each mount attempt.
- app.permissions / app.teams / app.occupancy: In-process host capabilities.
- app.lang: Actor-facing messages.
- app.main: HTTP surface for checks, reloads and registry management.
"""
