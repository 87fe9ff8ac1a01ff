from aiohttp import web

from sbomgate.core.config import GatewayConfig
from sbomgate.services.package_service import PackageService
from sbomgate.vex.shared import SharedIndex

CONFIG_KEY = web.AppKey('config', GatewayConfig)
INDEX_KEY = web.AppKey('vex_index', SharedIndex)
SERVICE_KEY = web.AppKey('package_service', PackageService)
