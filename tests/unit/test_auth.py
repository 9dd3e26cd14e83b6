"""Tests for access token providers."""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from gemctl.auth import (
    ADCTokenProvider,
    GcloudTokenProvider,
    default_token_provider,
)
from gemctl.exceptions import AuthenticationError


class TestGcloudTokenProvider:
    def test_token(self):
        result = MagicMock(returncode=0, stdout="ya29.token\n", stderr="")
        with patch("gemctl.auth.subprocess.run", return_value=result) as run:
            assert GcloudTokenProvider(gcloud="/bin/gcloud")() == "ya29.token"
        assert run.call_args.args[0] == ["/bin/gcloud", "auth", "print-access-token"]

    def test_not_installed(self):
        with patch("gemctl.auth.shutil.which", return_value=None):
            with pytest.raises(AuthenticationError, match="gcloud CLI not found"):
                GcloudTokenProvider()()

    def test_command_fails(self):
        result = MagicMock(returncode=1, stdout="", stderr="not logged in")
        with patch("gemctl.auth.subprocess.run", return_value=result):
            with pytest.raises(AuthenticationError, match="not logged in"):
                GcloudTokenProvider(gcloud="/bin/gcloud")()

    def test_empty_token(self):
        result = MagicMock(returncode=0, stdout="  \n", stderr="")
        with patch("gemctl.auth.subprocess.run", return_value=result):
            with pytest.raises(AuthenticationError, match="empty"):
                GcloudTokenProvider(gcloud="/bin/gcloud")()

    def test_timeout(self):
        with patch(
            "gemctl.auth.subprocess.run", side_effect=subprocess.TimeoutExpired("gcloud", 30)
        ):
            with pytest.raises(AuthenticationError, match="Failed to run gcloud"):
                GcloudTokenProvider(gcloud="/bin/gcloud")()


class TestADCTokenProvider:
    def test_missing_google_auth(self):
        """Without the adc extra an ImportError with an install hint is raised."""
        with patch.dict(sys.modules, {"google.auth": None}):
            with pytest.raises(ImportError, match=r"gemctl\[adc\]"):
                ADCTokenProvider()

    def test_refreshes_invalid_credentials(self):
        pytest.importorskip("google.auth")
        credentials = MagicMock(valid=False, token="adc-token")
        with patch("google.auth.default", return_value=(credentials, "proj")) as default:
            provider = ADCTokenProvider()
            assert provider() == "adc-token"
            assert provider() == "adc-token"
        default.assert_called_once()
        assert credentials.refresh.call_count == 2

    def test_no_credentials(self):
        google_auth = pytest.importorskip("google.auth")
        with patch(
            "google.auth.default",
            side_effect=google_auth.exceptions.DefaultCredentialsError("none"),
        ):
            with pytest.raises(AuthenticationError, match="No Application Default Credentials"):
                ADCTokenProvider()()


class TestDefaultProvider:
    def test_gcloud_by_default(self):
        assert isinstance(default_token_provider(), GcloudTokenProvider)

    def test_service_account(self):
        pytest.importorskip("google.auth")
        assert isinstance(default_token_provider(use_service_account=True), ADCTokenProvider)
