"""Department Public Pages package.

This module serves as the root of the Department Public Pages Python package,
which renders department-scoped public content pages (gallery, projects and
research) for an institutional website from a remote public REST API.

The package keeps a layered architecture: the CLI entrypoint, the headless
runner that sequences page builds, and the core pipeline layer that talks to
the remote service and composes page state.

Package Structure
-----------------
- `pipeline/public_api/`:
    Configuration loading, department identity resolution, the asynchronous
    transport with its revalidation window, typed domain records and the
    resource accessors built on the transport.
- `pipeline/website_generator/`:
    Page composition (fallible stages with documented fallbacks), rendering
    helpers and the headless runner.
- `config.py`: All configuration constants (paths, defaults, page copy), as UPPER_SNAKE_CASE.
- `exceptions.py`: The project-specific exception taxonomy.

Examples
--------
Basic import pattern:

>>> import deptsite
>>> # See `deptsite.program_generate_pages` for the CLI entrypoint.

"""
