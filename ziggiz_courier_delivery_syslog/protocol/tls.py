# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Client TLS context construction for syslog over TLS

# Standard library imports
import logging
import os
import ssl

from typing import Optional

# Local/package imports
from ziggiz_courier_delivery_syslog.errors import ConfigurationError

logger = logging.getLogger("ziggiz_courier_delivery_syslog.protocol.tls")


class TrustContextBuilder:
    """
    Helper class to build SSL contexts for outgoing TLS connections.

    This class configures peer verification, trusted CA material and
    certificate revocation checking on a client-side SSL context.
    """

    @staticmethod
    def create_client_context(
        verify: bool = False,
        cacert: Optional[str] = None,
        crl: Optional[str] = None,
        crl_check_all: bool = False,
    ) -> ssl.SSLContext:
        """
        Create an SSL context for connecting to a syslog server.

        Args:
            verify: Whether to verify the server certificate chain
            cacert: CA certificate file, chain file or CA directory; system CAs are always included
            crl: PEM file holding one or more CRLs
            crl_check_all: Check revocation for the complete chain instead of the leaf only

        Returns:
            The configured SSL context

        Raises:
            ConfigurationError: If a configured CA or CRL path does not exist
        """
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

        if not verify:
            # check_hostname must be disabled before verify_mode can be relaxed
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context

        # Only the chain is verified; the host name is used for SNI alone
        context.check_hostname = False
        context.verify_mode = ssl.CERT_REQUIRED
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)

        if cacert:
            if os.path.isdir(cacert):
                context.load_verify_locations(capath=cacert)
            elif os.path.isfile(cacert):
                context.load_verify_locations(cafile=cacert)
            else:
                raise ConfigurationError(f"CA certificate path not found: {cacert}")

        if crl:
            if not os.path.isfile(crl):
                raise ConfigurationError(f"CRL file not found: {crl}")
            # load_verify_locations accepts PEM bundles holding several CRLs
            context.load_verify_locations(cafile=crl)
            flags = ssl.VERIFY_CRL_CHECK_LEAF
            if crl_check_all:
                flags |= ssl.VERIFY_CRL_CHECK_CHAIN
            context.verify_flags |= flags

        logger.debug(
            "Created client TLS context",
            extra={
                "cacert": cacert,
                "crl": crl,
                "crl_check_all": crl_check_all,
            },
        )
        return context
