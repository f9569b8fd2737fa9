"""Services Layer — the imperative shell around the pure federation core.

Invariants:
    - Services orchestrate IO (tier stores, reference lookups) around pure core logic
    - Store failures stop at the tier executor; only caller errors reach the API

Design Decisions:
    - Engine receives its store handles at construction (impureim sandwich:
      plan purely, execute concurrently, merge purely)
"""
