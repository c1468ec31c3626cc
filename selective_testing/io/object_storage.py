"""OCI Object Storage access for the remote selective-tests cache."""

from __future__ import annotations

from typing import Any

from oci.auth.signers import InstancePrincipalsSecurityTokenSigner
from oci.config import from_file
from oci.object_storage import ObjectStorageClient
from oci.signer import Signer


def _signer(
    auth_mode: str,
    oci_config_file: str | None,
    oci_profile: str,
) -> tuple[Any, dict[str, Any]]:
    """Signer and SDK config for ``auth_mode``."""
    if auth_mode == "instance_principal":
        # CI runners on OCI compute; no local key material.
        return InstancePrincipalsSecurityTokenSigner(), {}

    if auth_mode == "api_key":
        if oci_config_file is None:
            raise ValueError("oci_config_file is required for api_key auth")

        config = from_file(file_location=oci_config_file, profile_name=oci_profile)
        signer = Signer(
            tenancy=config["tenancy"],
            user=config["user"],
            fingerprint=config["fingerprint"],
            private_key_file_location=config["key_file"],
            pass_phrase=config.get("pass_phrase"),
        )
        return signer, config

    raise ValueError(f"Unknown auth_mode: {auth_mode}")


class OCIObjectStorageShim:
    """
    Key-addressed object writes and existence checks on one OCI namespace.

    The remote cache store only ever uploads entry files and checks for
    an entry's completion marker, so that is all this adapter exposes.
    """

    def __init__(
        self,
        *,
        region: str | None = None,
        auth_mode: str = "instance_principal",
        oci_config_file: str | None = None,
        oci_profile: str = "DEFAULT",
    ) -> None:
        signer, config = _signer(auth_mode, oci_config_file, oci_profile)

        client_kwargs: dict[str, Any] = {}
        if region:
            client_kwargs["region"] = region

        self.client = ObjectStorageClient(config=config, signer=signer, **client_kwargs)
        self.namespace = self.client.get_namespace().data

    def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> str | None:
        """Upload ``body`` under ``key``; returns the ETag OCI reports, if any."""
        resp = self.client.put_object(
            namespace_name=self.namespace,
            bucket_name=bucket,
            object_name=key,
            put_object_body=body,
            content_type=content_type,
        )
        return resp.headers.get("etag")

    def object_exists(self, bucket: str, key: str) -> bool:
        # Prefix listing avoids the 404 a HEAD on a missing object raises.
        resp = self.client.list_objects(
            namespace_name=self.namespace,
            bucket_name=bucket,
            prefix=key,
            limit=1,
        )
        return any(obj.name == key for obj in resp.data.objects or [])
