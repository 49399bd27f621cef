"""Services Layer — orchestration over core rules and infrastructure adapters.

Invariants:
    - Services receive their collaborators (store, prober, issuer) as arguments
    - No HTTP types here: routes translate requests into service calls

Design Decisions:
    - Plain async functions where no state is held; a class only for the live check map
"""
