"""
Trophy Hub Errors.

Every failed check raises one of these. The host rolls back the call's
writes and re-raises, so a failed call has no effect on storage.
"""


class TrophyHubError(Exception):
    """Base class for all hub errors."""


class NotFound(TrophyHubError):
    """Unknown trophy id."""


class Unauthorized(TrophyHubError):
    """Caller is not the trophy's creator."""


class RuleMismatch(TrophyHubError):
    """Mint path or caller does not match the trophy's stored rule."""


class Expired(TrophyHubError):
    """Minting deadline has passed."""


class SupplyExceeded(TrophyHubError):
    """Mint would take the supply past the cap."""


class AlreadyMinted(TrophyHubError):
    """Claimant already minted this BySignature trophy."""


class SignatureInvalid(TrophyHubError):
    """Claim signature malformed or not valid for the caller."""


class BootstrapFailed(TrophyHubError):
    """NFT contract reply missing, unexpected or repeated."""


class InvalidRequest(TrophyHubError):
    """Malformed command (empty owners, missing metadata, bad cap)."""
