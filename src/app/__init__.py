# __init__.py
import logging
from flask import Flask

from app.api import build_api_blueprint, build_api_context

# Configure root logger at module import time (can be customized via app.config later)
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def create_app(ctx=None):
	# Standard Flask application factory
	app = Flask(__name__)

	if ctx is None:
		logger.debug("Loading API context from config")
		ctx = build_api_context()
	app.extensions["api_context"] = ctx
	app.register_blueprint(build_api_blueprint(ctx))

	@app.errorhandler(404)
	def not_found(_error):
		return {"ok": False, "message": "Not found."}, 404

	@app.errorhandler(405)
	def method_not_allowed(_error):
		return {"ok": False, "message": "Method not allowed."}, 405

	return app
