"""
Sensor Readings API
===================

HOW IT'S ORGANIZED:
------------------
- config.py   = Settings from environment variables / .env
- database.py = Connection pool and the three ways to run SQL
- models/     = Request and response shapes
- routers/    = API endpoints
- utils/      = Query parameter parsing
- check_db.py = "Is the database up?" from the command line
- main.py     = Puts it all together and starts the server
"""

__version__ = "1.0.0"
