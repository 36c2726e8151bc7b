"""
Static Analysis Passes.

Each module implements one pass over the input graph. The passes are pure
functions (or small accumulators) that the engine threads together.

Modules:
    - ``late_resources``: Assigning late resources to the init of a core.
    - ``ownership``: Ownership classes and priority ceilings.
    - ``locations``: Resource placement and initialization barriers.
    - ``obligations``: Accumulator of transfer/concurrent-read obligations.
    - ``safety``: Rules deciding which types must be transfer-safe.
    - ``timer_queue``: The deferred-dispatch queue.
    - ``channels``: Ready queues, free queues and spawn barriers.
    - ``priorities``: Optional priority compression.
    - ``preconditions``: Debug checks of the validator's guarantees.
"""
