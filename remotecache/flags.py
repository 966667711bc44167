"""Command line flags accepted by the cache server."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Tuple

AUTH_METHOD_IAM_ROLE = "iam_role"
AUTH_METHOD_AWS_CREDENTIALS_FILE = "aws_credentials_file"

S3_AUTH_METHODS = (
    AUTH_METHOD_IAM_ROLE,
    "access_key",
    AUTH_METHOD_AWS_CREDENTIALS_FILE,
)

MAX_INT64 = 2**63 - 1

_PLACEHOLDER = "value"


class FlagKind(enum.Enum):
    STRING = "string"
    INT = "int"
    INT64 = "int64"
    BOOL = "bool"
    DURATION = "duration"


_ZERO_VALUES = {
    FlagKind.STRING: "",
    FlagKind.INT: 0,
    FlagKind.INT64: 0,
    FlagKind.BOOL: False,
    FlagKind.DURATION: 0.0,
}


def _trim_fraction(whole: int, fraction: int, digits: int) -> str:
    if fraction == 0:
        return str(whole)
    return f"{whole}.{fraction:0{digits}d}".rstrip("0")


def _format_duration(seconds: float) -> str:
    """Format a duration in seconds the way durations are shown in help."""
    nanos = round(seconds * 1_000_000_000)
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 1_000_000:
        return f"{sign}{_trim_fraction(nanos // 1_000, nanos % 1_000, 3)}µs"
    if nanos < 1_000_000_000:
        return (
            f"{sign}{_trim_fraction(nanos // 1_000_000, nanos % 1_000_000, 6)}ms"
        )
    hours, rest = divmod(nanos, 3600 * 1_000_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000_000)
    secs = _trim_fraction(rest // 1_000_000_000, rest % 1_000_000_000, 9)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def _format_default(kind: FlagKind, value: Any) -> str:
    if kind is FlagKind.STRING:
        return json.dumps(value) if value != "" else ""
    if kind is FlagKind.BOOL:
        return "true" if value else "false"
    if kind is FlagKind.DURATION:
        return _format_duration(value)
    return str(value)


@dataclass(frozen=True)
class Flag:
    """A single command line flag, with its default and environment variables."""

    name: str
    kind: FlagKind = FlagKind.STRING
    default: Any = None
    usage: str = ""
    env_vars: Tuple[str, ...] = field(default_factory=tuple)
    default_text: str = ""
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.default is None:
            object.__setattr__(self, "default", _ZERO_VALUES[self.kind])

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.name, *self.aliases)

    def help_text(self) -> str:
        """Return the one-line description used in the help output.

        The flag names and the description are separated by a tab.
        """
        placeholder = "" if self.kind is FlagKind.BOOL else _PLACEHOLDER

        shown_default = self.default_text or _format_default(self.kind, self.default)
        default_part = f" (default: {shown_default})" if shown_default else ""

        prefixed = []
        for name in self.names:
            if not name:
                continue
            text = ("-" if len(name) == 1 else "--") + name
            if placeholder:
                text += " " + placeholder
            prefixed.append(text)

        line = f"{', '.join(prefixed)}\t{(self.usage + default_part).strip()}"
        if self.env_vars:
            line += " [" + ", ".join("$" + var for var in self.env_vars) + "]"
        return line


HELP_FLAG = Flag(name="help", kind=FlagKind.BOOL, usage="show help", aliases=("h",))


def s3_auth_message(*args: str) -> str:
    """Describe which s3 auth methods a flag applies to."""
    return f"Applies to s3 auth method(s): {', '.join(args)}."


def cli_flags() -> list[Flag]:
    """Return every flag the server accepts, in display order."""
    S, I, I64, B, D = (
        FlagKind.STRING,
        FlagKind.INT,
        FlagKind.INT64,
        FlagKind.BOOL,
        FlagKind.DURATION,
    )
    static_method_note = s3_auth_message(S3_AUTH_METHODS[1])
    return [
        Flag("config_file", S, "",
             "Path to a YAML configuration file. If this flag is specified then all other flags "
             "are ignored.",
             ("BAZEL_REMOTE_CONFIG_FILE",)),
        Flag("dir", S, "",
             "Directory path where to store the cache contents. This flag is required.",
             ("BAZEL_REMOTE_DIR",)),
        Flag("max_size", I64, -1,
             "The maximum size of bazel-remote's disk cache in GiB. This flag is required.",
             ("BAZEL_REMOTE_MAX_SIZE",)),
        Flag("storage_mode", S, "zstd",
             "Which format to store CAS blobs in. Must be one of \"zstd\" or \"uncompressed\".",
             ("BAZEL_REMOTE_STORAGE_MODE",)),
        Flag("http_address", S, "",
             "Address specification for the HTTP server listener, formatted either as [host]:port "
             "for TCP or unix://path.sock for Unix domain sockets.",
             ("BAZEL_REMOTE_HTTP_ADDRESS",)),
        Flag("host", S, "",
             "DEPRECATED. Use --http_address to specify the HTTP server listener.",
             ("BAZEL_REMOTE_HOST",)),
        Flag("port", I, 8080,
             "DEPRECATED. Use --http_address to specify the HTTP server listener.",
             ("BAZEL_REMOTE_PORT",)),
        Flag("grpc_address", S, "",
             "Address specification for the gRPC server listener, formatted either as [host]:port "
             "for TCP or unix://path.sock for Unix domain sockets. Set to 'none' to disable.",
             ("BAZEL_REMOTE_GRPC_ADDRESS",)),
        Flag("grpc_port", I, 9092,
             "DEPRECATED. Use --grpc_address to specify the gRPC server listener. Set to 0 to disable.",
             ("BAZEL_REMOTE_GRPC_PORT",)),
        Flag("profile_address", S, "",
             "Address specification for a http server to listen on for profiling, formatted either "
             "as [host]:port for TCP or unix://path.sock for Unix domain sockets. Off by default, "
             "but can also be set to 'none' to disable explicitly.",
             ("BAZEL_REMOTE_PROFILE_ADDRESS",),
             default_text="\"\", ie profiling disabled"),
        Flag("profile_host", S, "127.0.0.1",
             "DEPRECATED. Use --profile_address instead. A host address to listen on for profiling, "
             "if enabled by a valid --profile_port setting.",
             ("BAZEL_REMOTE_PROFILE_HOST",)),
        Flag("profile_port", I, 0,
             "DEPRECATED. Use --profile_address instead. If a positive integer, serve "
             "/debug/pprof/* URLs from http://profile_host:profile_port.",
             ("BAZEL_REMOTE_PROFILE_PORT",),
             default_text="0, ie profiling disabled"),
        Flag("http_read_timeout", D, 0.0,
             "The HTTP read timeout for a client request in seconds (does not apply to the proxy "
             "backends or the profiling endpoint)",
             ("BAZEL_REMOTE_HTTP_READ_TIMEOUT",),
             default_text="0s, ie disabled"),
        Flag("http_write_timeout", D, 0.0,
             "The HTTP write timeout for a server response in seconds (does not apply to the proxy "
             "backends or the profiling endpoint)",
             ("BAZEL_REMOTE_HTTP_WRITE_TIMEOUT",),
             default_text="0s, ie disabled"),
        Flag("htpasswd_file", S, "",
             "Path to a .htpasswd file. This flag is optional. Please read the htpasswd "
             "documentation.",
             ("BAZEL_REMOTE_HTPASSWD_FILE",)),
        Flag("tls_ca_file", S, "",
             "Optional. Enables mTLS (authenticating client certificates), should be the "
             "certificate authority that signed the client certificates.",
             ("BAZEL_REMOTE_TLS_CA_FILE",)),
        Flag("tls_cert_file", S, "", "Path to a pem encoded certificate file.",
             ("BAZEL_REMOTE_TLS_CERT_FILE",)),
        Flag("tls_key_file", S, "", "Path to a pem encoded key file.",
             ("BAZEL_REMOTE_TLS_KEY_FILE",)),
        Flag("allow_unauthenticated_reads", B, False,
             "If authentication is enabled (--htpasswd_file or --tls_ca_file), allow "
             "unauthenticated clients read access.",
             ("BAZEL_REMOTE_UNAUTHENTICATED_READS",),
             default_text="false, ie if authentication is required, read-only requests must "
             "also be authenticated"),
        Flag("idle_timeout", D, 0.0,
             "The maximum period of having received no request after which the server will shut "
             "itself down.",
             ("BAZEL_REMOTE_IDLE_TIMEOUT",),
             default_text="0s, ie disabled"),
        Flag("max_queued_uploads", I, 1000000,
             "When using proxy backends, sets the maximum number of objects in queue for upload. "
             "If the queue is full, uploads will be skipped until the queue has space again.",
             ("BAZEL_REMOTE_MAX_QUEUED_UPLOADS",)),
        Flag("max_blob_size", I64, MAX_INT64,
             "The maximum logical/uncompressed blob size that will be accepted from clients. Note "
             "that this limit is not applied to preexisting blobs in the cache.",
             ("BAZEL_REMOTE_MAX_BLOB_SIZE",),
             default_text=str(MAX_INT64)),
        Flag("max_proxy_blob_size", I64, MAX_INT64,
             "The maximum logical/uncompressed blob size that will be downloaded from proxies. "
             "Note that this limit is not applied to preexisting blobs in the cache.",
             ("BAZEL_REMOTE_MAX_PROXY_BLOB_SIZE",),
             default_text=str(MAX_INT64)),
        Flag("num_uploaders", I, 100,
             "When using proxy backends, sets the number of Goroutines to process parallel "
             "uploads to backend.",
             ("BAZEL_REMOTE_NUM_UPLOADERS",)),
        Flag("http_proxy.url", S, "", "The base URL to use for a http proxy backend.",
             ("BAZEL_REMOTE_HTTP_PROXY_URL",)),
        Flag("gcs_proxy.bucket", S, "",
             "The bucket to use for the Google Cloud Storage proxy backend.",
             ("BAZEL_REMOTE_GCS_BUCKET",)),
        Flag("gcs_proxy.use_default_credentials", B, False,
             "Whether or not to use authentication for the Google Cloud Storage proxy backend.",
             ("BAZEL_REMOTE_GCS_USE_DEFAULT_CREDENTIALS",)),
        Flag("gcs_proxy.json_credentials_file", S, "",
             "Path to a JSON file that contains Google credentials for the Google Cloud Storage "
             "proxy backend.",
             ("BAZEL_REMOTE_GCS_JSON_CREDENTIALS_FILE",)),
        Flag("s3.endpoint", S, "",
             "The S3/minio endpoint to use when using S3 proxy backend.",
             ("BAZEL_REMOTE_S3_ENDPOINT",)),
        Flag("s3.bucket", S, "",
             "The S3/minio bucket to use when using S3 proxy backend.",
             ("BAZEL_REMOTE_S3_BUCKET",)),
        Flag("s3.prefix", S, "",
             "The S3/minio object prefix to use when using S3 proxy backend.",
             ("BAZEL_REMOTE_S3_PREFIX",)),
        Flag("s3.auth_method", S, "",
             "The S3/minio authentication method. This argument is required when an s3 proxy "
             f"backend is used. Allowed values: {', '.join(S3_AUTH_METHODS)}.",
             ("BAZEL_REMOTE_S3_AUTH_METHOD",)),
        Flag("s3.access_key_id", S, "",
             "The S3/minio access key to use when using S3 proxy backend. "
             + static_method_note,
             ("BAZEL_REMOTE_S3_ACCESS_KEY_ID",)),
        Flag("s3.secret_access_key", S, "",
             "The S3/minio secret access key to use when using S3 proxy backend. "
             + static_method_note,
             ("BAZEL_REMOTE_S3_SECRET_ACCESS_KEY",)),
        Flag("s3.aws_shared_credentials_file", S, "",
             "Path to the AWS credentials file. If not specified, the minio client will default "
             "to '~/.aws/credentials'. " + s3_auth_message(AUTH_METHOD_AWS_CREDENTIALS_FILE),
             ("BAZEL_REMOTE_S3_AWS_SHARED_CREDENTIALS_FILE", "AWS_SHARED_CREDENTIALS_FILE")),
        Flag("s3.aws_profile", S, "default",
             "The aws credentials profile to use from within s3.aws_shared_credentials_file. "
             + s3_auth_message(AUTH_METHOD_AWS_CREDENTIALS_FILE),
             ("BAZEL_REMOTE_S3_AWS_PROFILE", "AWS_PROFILE")),
        Flag("s3.disable_ssl", B, False,
             "Whether to disable TLS/SSL when using the S3 proxy backend.",
             ("BAZEL_REMOTE_S3_DISABLE_SSL",),
             default_text="false, ie enable TLS/SSL"),
        Flag("s3.update_timestamps", B, False,
             "Whether to update timestamps of object on cache hit.",
             ("BAZEL_REMOTE_S3_UPDATE_TIMESTAMPS",),
             default_text="false"),
        Flag("s3.iam_role_endpoint", S, "",
             "Endpoint for using IAM security credentials. By default it will look for "
             "credentials in the standard locations for the AWS platform. "
             + s3_auth_message(AUTH_METHOD_IAM_ROLE),
             ("BAZEL_REMOTE_S3_IAM_ROLE_ENDPOINT",)),
        Flag("s3.region", S, "",
             "The AWS region. Required when not specifying S3/minio access keys.",
             ("BAZEL_REMOTE_S3_REGION",)),
        Flag("s3.key_version", I, 2,
             "DEPRECATED. Key version 2 now is the only supported value. This flag will be removed.",
             ("BAZEL_REMOTE_S3_KEY_VERSION",),
             default_text="2"),
        Flag("disable_http_ac_validation", B, False,
             "Whether to disable ActionResult validation for HTTP requests.",
             ("BAZEL_REMOTE_DISABLE_HTTP_AC_VALIDATION",),
             default_text="false, ie enable validation"),
        Flag("disable_grpc_ac_deps_check", B, False,
             "Whether to disable ActionResult dependency checks for gRPC GetActionResult requests.",
             ("BAZEL_REMOTE_DISABLE_GRPS_AC_DEPS_CHECK",),
             default_text="false, ie enable ActionCache dependency checks"),
        Flag("enable_ac_key_instance_mangling", B, False,
             "Whether to enable mangling ActionCache keys with non-empty instance names.",
             ("BAZEL_REMOTE_ENABLE_AC_KEY_INSTANCE_MANGLING",),
             default_text="false, ie disable mangling"),
        Flag("enable_endpoint_metrics", B, False,
             "Whether to enable metrics for each HTTP/gRPC endpoint.",
             ("BAZEL_REMOTE_ENABLE_ENDPOINT_METRICS",),
             default_text="false, ie disable metrics"),
        Flag("experimental_remote_asset_api", B, False,
             "Whether to enable the experimental remote asset API implementation.",
             ("BAZEL_REMOTE_EXPERIMENTAL_REMOTE_ASSET_API",),
             default_text="false, ie disable remote asset API"),
        Flag("access_log_level", S, "all",
             "The access logger verbosity level. If supplied, must be one of \"none\" or \"all\".",
             ("BAZEL_REMOTE_ACCESS_LOG_LEVEL",),
             default_text="all, ie enable full access logging"),
    ]