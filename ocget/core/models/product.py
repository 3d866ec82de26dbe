"""
Product model — the fixed set of installable tools and their mirror layout.

Every per-product difference (where the archive lives, what it is
called, where the binary sits inside it, how "latest" is resolved)
is expressed as data in ``PRODUCT_SPECS``. Nothing else in the code
branches on the product name.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

MIRROR_ROOT = "https://mirror.openshift.com/pub/openshift-v4/clients"

LATEST = "latest"


class Product(StrEnum):
    """Installable products."""

    CLIENT = "client"
    INSTALLER = "installer"
    CRC = "crc"
    ODO = "odo"


class VersionSource(StrEnum):
    """How a product's ``latest`` tag is turned into a version."""

    RELEASE_TXT = "release_txt"          # ocp/latest/release.txt
    RELEASE_INFO_JSON = "release_info"   # crc/latest/release-info.json
    BINARY = "binary"                    # run the extracted binary


class ProductSpec(BaseModel):
    """Static description of one product on the mirror.

    Templates are ``str.format`` strings with a single ``{version}``
    placeholder.
    """

    model_config = ConfigDict(frozen=True)

    product: Product
    prefix: str                  # artifact name is "<prefix>-linux-<version>"
    binary_name: str             # canonical symlink name in the install dir
    base_url: str
    version_source: VersionSource
    metadata_path: str = ""      # relative to base_url, for metadata sources
    remote_dir: str = "{version}"
    version_prefix: str = ""     # tag prefix users may type, e.g. "v3.15.0"
    latest_dir: str = LATEST
    filename: str
    member: str                  # path of the binary inside the archive
    version_args: tuple[str, ...] = ()

    def normalize_version(self, version: str) -> str:
        """Strip the mirror tag prefix from a user-supplied version."""
        if self.version_prefix and version.startswith(self.version_prefix):
            return version[len(self.version_prefix):]
        return version

    def artifact_name(self, version: str) -> str:
        """Version-suffixed filename placed in the install directory."""
        return f"{self.prefix}-linux-{version}"

    def archive_url(self, version: str, *, latest: bool = False) -> str:
        """Full URL of the release archive for ``version``.

        ``latest=True`` addresses the mirror's ``latest`` directory,
        used before the concrete version is known.
        """
        directory = self.latest_dir if latest else self.remote_dir.format(version=version)
        return f"{self.base_url.rstrip('/')}/{directory}/{self.filename.format(version=version)}"

    def metadata_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.metadata_path}"

    def member_path(self, version: str) -> str:
        return self.member.format(version=version)

    def with_base_url(self, base_url: str) -> ProductSpec:
        """Copy of this spec served from a different mirror."""
        return self.model_copy(update={"base_url": base_url})


PRODUCT_SPECS: dict[Product, ProductSpec] = {
    Product.CLIENT: ProductSpec(
        product=Product.CLIENT,
        prefix="openshift-client",
        binary_name="oc",
        base_url=f"{MIRROR_ROOT}/ocp",
        version_source=VersionSource.RELEASE_TXT,
        metadata_path="latest/release.txt",
        filename="openshift-client-linux-{version}.tar.gz",
        member="oc",
    ),
    Product.INSTALLER: ProductSpec(
        product=Product.INSTALLER,
        prefix="openshift-install",
        binary_name="openshift-install",
        base_url=f"{MIRROR_ROOT}/ocp",
        version_source=VersionSource.RELEASE_TXT,
        metadata_path="latest/release.txt",
        filename="openshift-install-linux-{version}.tar.gz",
        member="openshift-install",
    ),
    Product.CRC: ProductSpec(
        product=Product.CRC,
        prefix="crc",
        binary_name="crc",
        base_url=f"{MIRROR_ROOT}/crc",
        version_source=VersionSource.RELEASE_INFO_JSON,
        metadata_path="latest/release-info.json",
        filename="crc-linux-amd64.tar.xz",
        member="crc-linux-{version}-amd64/crc",
    ),
    Product.ODO: ProductSpec(
        product=Product.ODO,
        prefix="odo",
        binary_name="odo",
        base_url=f"{MIRROR_ROOT}/odo",
        version_source=VersionSource.BINARY,
        remote_dir="v{version}",
        version_prefix="v",
        filename="odo-linux-amd64.tar.gz",
        member="odo",
        version_args=("version", "--client"),
    ),
}

ALL_PRODUCTS: tuple[Product, ...] = tuple(Product)


def get_spec(product: Product, mirrors: dict[str, str] | None = None) -> ProductSpec:
    """Look up a product spec, applying an optional base URL override."""
    spec = PRODUCT_SPECS[product]
    if mirrors and mirrors.get(product.value):
        return spec.with_base_url(mirrors[product.value])
    return spec
