"""Infrastructure Layer — storage backends, HTTP prober, scheduler, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External failures are mapped onto core/errors.py types at this layer
"""
