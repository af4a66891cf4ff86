"""Client-visible projection of the server configuration.

`ClientProjection` is an explicit allow-list: a configuration field reaches
untrusted clients only if it is declared here and copied by
`projection_build_client`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from chatserver.config import Configuration
from chatserver.domain import BuildInfo
from chatserver.providers import IdentityProviderRegistry


class ClientProjection(BaseModel):
    """Flat bootstrap payload served to web and mobile clients.

    Every value is a string except `OAuthProviderDisplayNames`, which is only
    present when identity providers were loaded.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    version: str
    build_number: str
    build_date: str
    build_hash: str
    build_enterprise_ready: str

    site_name: str
    enable_team_creation: str
    enable_user_creation: str
    restrict_team_names: str
    enable_team_listing: str

    enable_oauth_service_provider: str = Field(alias="EnableOAuthServiceProvider")
    segment_developer_key: str
    google_developer_key: str
    enable_incoming_webhooks: str
    enable_outgoing_webhooks: str
    enable_post_username_override: str
    enable_post_icon_override: str
    enable_developer: str

    send_email_notifications: str
    enable_sign_up_with_email: str
    require_email_verification: str
    feedback_email: str

    enable_sign_up_with_gitlab: str = Field(alias="EnableSignUpWithGitLab")
    enable_sign_up_with_google: str
    enable_sign_up_with_oauth: str = Field(alias="EnableSignUpWithOAuth")
    oauth_provider_display_names: list[str] | None = Field(default=None, alias="OAuthProviderDisplayNames")

    show_email_address: str

    terms_of_service_link: str
    privacy_policy_link: str
    about_link: str
    help_link: str
    report_a_problem_link: str
    support_email: str

    enable_public_link: str
    profile_height: str
    profile_width: str

    enable_ldap: str


def projection_build_client(
    configuration: Configuration,
    registry: IdentityProviderRegistry,
    build_info: BuildInfo,
) -> ClientProjection:
    """Derive the client projection from a validated configuration.

    `EnableSignUpWithOAuth` is true whenever the extension loader merged at
    least one enabled provider into `oauth_settings`. Display names follow
    registration order; providers missing from the registry are skipped
    without affecting the flag.

    Args:
        configuration: Validated, defaulted configuration.
        registry: Registry used to resolve provider display names.
        build_info: Build metadata of the running server.

    Returns:
        ClientProjection: Allow-listed client payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    team = configuration.team_settings
    service = configuration.service_settings
    email = configuration.email_settings
    support = configuration.support_settings
    files = configuration.file_settings

    oauth_display_names: list[str] | None = None
    if configuration.oauth_settings is not None:
        oauth_display_names = []
        for provider_name in configuration.oauth_settings:
            provider = registry.provider_get(provider_name)
            if provider is None:
                continue
            oauth_display_names.append(provider.provider_display_name())

    return ClientProjection(
        version=build_info.version,
        build_number=build_info.build_number,
        build_date=build_info.build_date,
        build_hash=build_info.build_hash,
        build_enterprise_ready=_format_bool(build_info.enterprise_ready),
        site_name=team.site_name,
        enable_team_creation=_format_bool(team.enable_team_creation),
        enable_user_creation=_format_bool(team.enable_user_creation),
        restrict_team_names=_format_bool(team.restrict_team_names),
        enable_team_listing=_format_bool(team.enable_team_listing),
        enable_oauth_service_provider=_format_bool(service.enable_oauth_service_provider),
        segment_developer_key=service.segment_developer_key,
        google_developer_key=service.google_developer_key,
        enable_incoming_webhooks=_format_bool(service.enable_incoming_webhooks),
        enable_outgoing_webhooks=_format_bool(service.enable_outgoing_webhooks),
        enable_post_username_override=_format_bool(service.enable_post_username_override),
        enable_post_icon_override=_format_bool(service.enable_post_icon_override),
        enable_developer=_format_bool(service.enable_developer),
        send_email_notifications=_format_bool(email.send_email_notifications),
        enable_sign_up_with_email=_format_bool(email.enable_sign_up_with_email),
        require_email_verification=_format_bool(email.require_email_verification),
        feedback_email=email.feedback_email,
        enable_sign_up_with_gitlab=_format_bool(configuration.gitlab_settings.enable),
        enable_sign_up_with_google=_format_bool(configuration.google_settings.enable),
        enable_sign_up_with_oauth=_format_bool(configuration.oauth_settings is not None),
        oauth_provider_display_names=oauth_display_names,
        show_email_address=_format_bool(configuration.privacy_settings.show_email_address),
        terms_of_service_link=support.terms_of_service_link or "",
        privacy_policy_link=support.privacy_policy_link or "",
        about_link=support.about_link or "",
        help_link=support.help_link or "",
        report_a_problem_link=support.report_a_problem_link or "",
        support_email=support.support_email or "",
        enable_public_link=_format_bool(files.enable_public_link),
        profile_height=str(files.profile_height),
        profile_width=str(files.profile_width),
        enable_ldap=_format_bool(configuration.ldap_settings.enable),
    )


def projection_to_dict(projection: ClientProjection) -> dict[str, object]:
    """Return the projection as the flat JSON-ready mapping served to clients."""

    return projection.model_dump(by_alias=True, exclude_none=True)


def projection_to_json(projection: ClientProjection) -> str:
    return projection.model_dump_json(by_alias=True, exclude_none=True)


def _format_bool(value: bool | None) -> str:
    return "true" if value else "false"
