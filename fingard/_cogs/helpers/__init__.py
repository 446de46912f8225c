"""
General-purpose helpers not related to the finalizers themselves,
which are used to prepare and control the runtime environment.

These are things that should better be in the standard library
or in the dependencies. Helpers do not depend on anything else
in the package and could be extracted as reusable libraries.
"""
