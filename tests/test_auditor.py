"""Tests for the post-convergence auditor."""

import os
from pathlib import Path

from conftest import make_file

from sshperms.audit.auditor import Auditor, describe_bits, excess_access
from sshperms.isolation.lockdown import ConvergenceEngine
from sshperms.policy.categories import Category


class TestExcessAccess:
    def test_private_roles_allow_nothing(self):
        assert excess_access(0o640, Category.PRIVATE_KEY) == 0o040
        assert excess_access(0o600, Category.CLIENT_CONFIG) == 0
        assert excess_access(0o602, Category.AUTHORIZED_KEYS) == 0o002

    def test_public_roles_allow_read(self):
        assert excess_access(0o644, Category.PUBLIC_KEY) == 0
        assert excess_access(0o664, Category.KNOWN_HOSTS) == 0o020
        assert excess_access(0o400, Category.PUBLIC_KEY) == 0

    def test_describe_bits(self):
        assert describe_bits(0o044) == "group read, other read"
        assert describe_bits(0o002) == "other write"


class TestAuditor:
    def test_clean_directory(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "id_rsa", 0o600)
        make_file(ssh_dir, "id_rsa.pub", 0o644)
        make_file(ssh_dir, "known_hosts", 0o644)
        assert Auditor().audit(ssh_dir) == []

    def test_flags_world_readable_private_key(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "id_ed25519", 0o644)

        findings = Auditor().audit(ssh_dir)

        assert len(findings) == 1
        assert findings[0].category == Category.PRIVATE_KEY
        assert findings[0].critical
        assert findings[0].excess_bits == 0o044

    def test_flags_group_readable_config(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "config", 0o640)
        findings = Auditor().audit(ssh_dir)
        assert [f.category for f in findings] == [Category.CLIENT_CONFIG]

    def test_flags_group_writable_known_hosts(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "known_hosts", 0o664)
        findings = Auditor().audit(ssh_dir)
        assert len(findings) == 1
        assert not findings[0].critical

    def test_restrictive_public_key_is_not_a_finding(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "id_rsa.pub", 0o600)
        assert Auditor().audit(ssh_dir) == []

    def test_unclassified_never_flagged(self, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        make_file(ssh_dir, "notes.txt", 0o666)
        assert Auditor().audit(ssh_dir) == []

    def test_flags_directory_mode(self, ssh_dir: Path):
        findings = Auditor().audit(ssh_dir)
        assert len(findings) == 1
        assert findings[0].category is None
        assert findings[0].mode == 0o755
        assert findings[0].expected_mode == 0o700

    def test_missing_directory(self, tmp_path: Path):
        findings = Auditor().audit(tmp_path / "absent")
        assert len(findings) == 1
        assert findings[0].critical

    def test_directory_path_is_a_file(self, tmp_path: Path):
        target = make_file(tmp_path, ".ssh", 0o600)
        findings = Auditor().audit(target)
        assert len(findings) == 1
        assert findings[0].detail == "credential directory path exists but is not a directory"

    def test_directory_under_a_file_is_missing(self, tmp_path: Path):
        blocker = make_file(tmp_path, "blocker", 0o600)
        findings = Auditor().audit(blocker / ".ssh")
        assert findings[0].detail == "credential directory is missing"

    def test_credential_symlink_is_reported(self, tmp_path: Path, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        outside = make_file(tmp_path, "shared_key", 0o644)
        os.symlink(outside, ssh_dir / "id_rsa")

        findings = Auditor().audit(ssh_dir)

        assert len(findings) == 1
        assert findings[0].category == Category.PRIVATE_KEY
        assert not findings[0].critical
        assert "symlink" in findings[0].detail

    def test_unclassified_symlink_is_ignored(self, tmp_path: Path, ssh_dir: Path):
        os.chmod(ssh_dir, 0o700)
        outside = make_file(tmp_path, "sock", 0o666)
        os.symlink(outside, ssh_dir / "agent.sock")
        assert Auditor().audit(ssh_dir) == []

    def test_audit_does_not_modify(self, ssh_dir: Path):
        key = make_file(ssh_dir, "id_rsa", 0o644)
        Auditor().audit(ssh_dir)
        assert key.stat().st_mode & 0o777 == 0o644
        assert ssh_dir.stat().st_mode & 0o777 == 0o755


class TestAuditIndependence:
    def test_reset_after_convergence_is_reported(self, messy_dir: Path, plain_probe):
        result = ConvergenceEngine(probe=plain_probe).converge(messy_dir)
        assert result.corrected_count == 5

        os.chmod(messy_dir / "id_ed25519", 0o644)

        findings = Auditor().audit(messy_dir)
        assert [Path(f.path).name for f in findings] == ["id_ed25519"]

    def test_silent_chmod_noop_is_reported(self, ssh_dir: Path, plain_probe, monkeypatch):
        make_file(ssh_dir, "id_rsa", 0o644)
        real_chmod = os.chmod

        def ignoring_chmod(path, mode, *args, **kwargs):
            if Path(path).name == "id_rsa":
                return None
            return real_chmod(path, mode, *args, **kwargs)

        monkeypatch.setattr(os, "chmod", ignoring_chmod)
        result = ConvergenceEngine(probe=plain_probe).converge(ssh_dir)
        assert result.corrected_count == 1

        findings = Auditor().audit(ssh_dir)
        assert [Path(f.path).name for f in findings] == ["id_rsa"]
