"""
Mount rules package.

- models: VehicleRule, Vehicle/Mountable, Decision and the API/storage schemas.
- engine: the first-match-wins evaluator that decides a single mount attempt.
- registry: holder that swaps the active rule table atomically on reload.
"""
