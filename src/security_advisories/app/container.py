from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.settings import AppConfig
from ..config.urls import PACKAGIST_WEB_BASE
from ..core.services.osv_exporter import OsvExporter
from ..core.services.validator import AdvisoryValidator
from ..core.usecases.clear_cache import ClearCacheUseCase
from ..core.usecases.export_advisories import ExportAdvisoriesUseCase
from ..core.usecases.validate_advisories import ValidateAdvisoriesUseCase
from ..infra.advisory_loader import YamlAdvisorySource
from ..infra.cache_diskcache import DiskCacheAdapter
from ..infra.cache_memory import MemoryCacheAdapter
from ..infra.git_timestamps import GitTimestampSource
from ..infra.http_client import HttpClient
from ..infra.osv_writer import JsonDirectoryWriter
from ..infra.packagist_registry import PackagistRegistry
from ..infra.rate_limiter import build_rate_limiter

logger = logging.getLogger(__name__)


def cache_resource(cache_backend, cache_dir, registry_cache_ttl_hours):
	ttl_seconds = int(registry_cache_ttl_hours) * 3600
	if cache_backend == "memory":
		logger.info("Initializing in-memory registry cache")
		with MemoryCacheAdapter(default_ttl_seconds=ttl_seconds) as cache:
			yield cache
		return

	cache_dir_str = str(cache_dir) if cache_dir else None
	logger.info(f"Initializing cache at: {cache_dir_str or 'default user cache directory'}")
	with DiskCacheAdapter(
		namespace="packagist",
		default_ttl_seconds=ttl_seconds,
		base_dir=cache_dir_str,
	) as cache:
		logger.debug("Cache initialized successfully")
		yield cache
	logger.debug("Cache closed")


def http_client_resource(timeout_seconds, requests_per_second):
	"""HTTP client for registry calls, closed when the container shuts down."""
	rate_limiter = build_rate_limiter(requests_per_second)
	if rate_limiter is not None:
		logger.info(f"Throttling registry requests to {requests_per_second}/s")
	client = HttpClient(timeout_seconds=timeout_seconds, rate_limiter=rate_limiter)
	try:
		yield client
	finally:
		logger.debug("Closing HTTP client")
		client.close()


class Container(containers.DeclarativeContainer):
	config = providers.Configuration(pydantic_settings=[AppConfig()])

	cache = providers.Resource(
		cache_resource,
		cache_backend=config.cache_backend,
		cache_dir=config.cache_dir,
		registry_cache_ttl_hours=config.registry_cache_ttl_hours,
	)

	http_client = providers.Resource(
		http_client_resource,
		timeout_seconds=config.http_timeout_seconds,
		requests_per_second=config.registry_requests_per_second,
	)

	# one registry per container so all workers share its cache
	registry = providers.Singleton(
		PackagistRegistry,
		cache=cache,
		http_client=http_client,
		base_url=config.registry_url,
		ttl_hours=config.registry_cache_ttl_hours,
		not_found_ttl_hours=config.registry_not_found_ttl_hours,
	)

	source = providers.Factory(YamlAdvisorySource, root=config.root_dir, vendor_dir=config.vendor_dir)

	validator = providers.Factory(
		AdvisoryValidator,
		registry=registry,
		exempt_packages=config.registry_exempt_packages,
	)
	offline_validator = providers.Factory(
		AdvisoryValidator,
		registry=None,
		exempt_packages=config.registry_exempt_packages,
	)

	exporter = providers.Factory(OsvExporter, id_prefix=config.osv_id_prefix, package_url_base=PACKAGIST_WEB_BASE)
	timestamps = providers.Factory(GitTimestampSource)
	writer = providers.Factory(JsonDirectoryWriter, target=config.output_dir)

	validate_uc = providers.Factory(
		ValidateAdvisoriesUseCase,
		source=source,
		validator=validator,
		workers=config.workers,
	)
	export_uc = providers.Factory(
		ExportAdvisoriesUseCase,
		source=source,
		registry=registry,
		exporter=exporter,
		timestamps=timestamps,
		writer=writer,
		workers=config.workers,
	)
	clear_cache_uc = providers.Factory(ClearCacheUseCase, cache=cache)
