"""OCL CodeSystem store: authorized, conflict-checked batch writes of code systems."""
