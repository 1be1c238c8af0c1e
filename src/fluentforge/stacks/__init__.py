"""
Code-generation stacks.

``pcf`` is the only stack: it emits a PCF virtual (or standard) React control
that uses Fluent UI v9.
"""
