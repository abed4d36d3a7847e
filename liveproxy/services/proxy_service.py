"""Proxy Core Service Module

Implements the request pipeline: target extraction, streaming classification,
outbound header policy, the upstream fetch, and response post-processing."""

import logging
from http import HTTPStatus
from typing import Optional

import httpx

from liveproxy.common.errors import AppError
from liveproxy.common.http_client import UpstreamClient
from liveproxy.common.target_url import extract_target_url, validate_target_url
from liveproxy.domain.policy import DEFAULT_POLICY, ProxyPolicy
from liveproxy.domain.request import InboundRequest, ProxyResponse, UpstreamResponse
from liveproxy.pages.config_page import render_config_page
from liveproxy.services.classifier import StreamingClassifier
from liveproxy.services.cors import CorsDecorator
from liveproxy.services.header_policy import HeaderPolicy
from liveproxy.services.redirect import RedirectRewriter
from liveproxy.services.response_shaper import ResponseShaper

logger = logging.getLogger(__name__)


class ProxyService:
    """
    Proxy Core Service

    Handles the complete flow of a proxied request:
    1. Extract the target URL from the request path (none -> configuration page)
    2. Classify the request as streaming or not
    3. Build outbound headers and fetch the target without following redirects
    4. Rewrite redirects, or shape the response for streaming/non-streaming delivery
    5. Add CORS headers

    Transport failures and undecodable targets become a plain-text 502.
    Upstream HTTP error statuses are relayed untouched.
    """

    def __init__(
        self,
        client: UpstreamClient,
        policy: ProxyPolicy = DEFAULT_POLICY,
        public_scheme: str = "https",
        classifier: Optional[StreamingClassifier] = None,
        header_policy: Optional[HeaderPolicy] = None,
        redirect_rewriter: Optional[RedirectRewriter] = None,
        response_shaper: Optional[ResponseShaper] = None,
        cors: Optional[CorsDecorator] = None,
    ):
        self.client = client
        self.classifier = classifier or StreamingClassifier(policy)
        self.header_policy = header_policy or HeaderPolicy(policy)
        self.redirect_rewriter = redirect_rewriter or RedirectRewriter(public_scheme)
        self.response_shaper = response_shaper or ResponseShaper()
        self.cors = cors or CorsDecorator()

    async def handle(self, inbound: InboundRequest) -> ProxyResponse:
        """
        Process one caller request

        Args:
            inbound: Caller request

        Returns:
            ProxyResponse: Response to return to the caller. When ``is_stream`` is
                true its ``close`` must be awaited once the body has been relayed.
        """
        try:
            target_url = extract_target_url(inbound.raw_path)
        except AppError as e:
            return self._error_response(e, inbound)

        if not target_url:
            return self._config_page_response(inbound.service_host)

        try:
            validate_target_url(target_url)
            is_streaming = self.classifier.classify(target_url, inbound.content_type)
            outbound_headers = self.header_policy.build_outbound_headers(
                inbound.headers, is_streaming
            )

            logger.info(
                "Proxy request: method=%s target=%s streaming=%s",
                inbound.method,
                target_url,
                is_streaming,
            )

            upstream = await self.client.send(
                method=inbound.method,
                url=target_url,
                headers=outbound_headers,
                body=inbound.body,
            )
        except AppError as e:
            return self._error_response(e, inbound, target_url)

        return self._build_response(upstream, inbound, target_url, is_streaming)

    def _build_response(
        self,
        upstream: UpstreamResponse,
        inbound: InboundRequest,
        target_url: str,
        is_streaming: bool,
    ) -> ProxyResponse:
        # Redirects are checked before the streaming branch; the next hop is
        # classified again when the client follows it.
        headers = self.redirect_rewriter.rewrite(
            upstream.status_code,
            upstream.headers,
            target_url,
            inbound.service_host,
        )
        if headers is None:
            headers = self.response_shaper.shape(upstream.headers, is_streaming)

        if upstream.status_code >= 400:
            logger.info(
                "Upstream returned error status: status=%s target=%s",
                upstream.status_code,
                target_url,
            )

        return ProxyResponse(
            status_code=upstream.status_code,
            reason_phrase=upstream.reason_phrase,
            headers=self.cors.decorate(headers, is_streaming),
            body=upstream.body,
            close=upstream.close,
        )

    def _config_page_response(self, service_host: str) -> ProxyResponse:
        headers = httpx.Headers({"Content-Type": "text/html; charset=utf-8"})
        return ProxyResponse(
            status_code=200,
            reason_phrase="OK",
            headers=self.cors.decorate(headers, is_streaming=False),
            body=render_config_page(service_host).encode("utf-8"),
        )

    def _error_response(
        self,
        error: AppError,
        inbound: InboundRequest,
        target_url: Optional[str] = None,
    ) -> ProxyResponse:
        logger.error(
            "Proxy request failed: method=%s target=%s code=%s error=%s",
            inbound.method,
            target_url,
            error.code,
            error.message,
        )
        return build_error_response(error, self.cors)


def build_error_response(error: AppError, cors: Optional[CorsDecorator] = None) -> ProxyResponse:
    """
    Build the plain-text response reported for a failed proxy request

    Args:
        error: Failure to report
        cors: Decorator used for the CORS headers

    Returns:
        ProxyResponse: 502 (or the error's own status) with a text/plain body
    """
    cors = cors or CorsDecorator()
    headers = httpx.Headers({"Content-Type": "text/plain; charset=utf-8"})
    return ProxyResponse(
        status_code=error.status_code,
        reason_phrase=HTTPStatus(error.status_code).phrase,
        headers=cors.decorate(headers, is_streaming=False),
        body=f"Proxy error: {error.message}".encode("utf-8"),
    )
