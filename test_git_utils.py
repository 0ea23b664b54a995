import os
import shutil
import subprocess
import tempfile
import unittest

import git_utils
from config import GlobalConfig
from context import RunContext
from data_sources.local_git import LocalGitDataSource
from errors import DiffComputationError, RepositoryAccessError

HAS_GIT = shutil.which("git") is not None


def git(repo: str, *args: str, name: str = "Alice", email: str = "alice@x.com") -> str:
    """在测试仓库中执行 git，作者身份通过环境变量注入"""
    env = dict(os.environ)
    env.update(
        {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_CONFIG_GLOBAL": os.devnull,
            "GIT_CONFIG_NOSYSTEM": "1",
        }
    )
    result = subprocess.run(
        ["git", *args], cwd=repo, env=env, capture_output=True, text=True, check=True
    )
    return result.stdout


def write(repo: str, filename: str, content: str):
    with open(os.path.join(repo, filename), "w", encoding="utf-8") as f:
        f.write(content)


def commit_file(repo: str, filename: str, content: str, message: str, **identity):
    write(repo, filename, content)
    git(repo, "add", filename, **identity)
    git(repo, "commit", "-q", "-m", message, **identity)


def make_context(repo_path: str) -> RunContext:
    return RunContext(
        repo_path=repo_path,
        scorer_id="mock",
        api_key="",
        endpoint="https://scoring.invalid/v1/analyze",
        timeout=None,
        global_config=GlobalConfig(),
    )


class TestParseGitLog(unittest.TestCase):

    def test_parse_root_and_child(self):
        output = (
            "c2\x1ft2\x1fc1\x1fBob\x1fbob@x.com\x1fsecond\n\nbody\n\x1e\n"
            "c1\x1ft1\x1f\x1fAlice\x1falice@x.com\x1ffirst\n\x1e\n"
        )
        commits = git_utils.parse_git_log(output)

        self.assertEqual([c.hash for c in commits], ["c2", "c1"])
        self.assertEqual(commits[0].parent_hash, "c1")
        self.assertEqual(commits[0].parent_tree, "t1")
        self.assertEqual(commits[0].message, "second\n\nbody\n")
        self.assertTrue(commits[1].is_root_commit)
        self.assertIsNone(commits[1].parent_tree)

    def test_merge_commit_uses_first_parent(self):
        output = (
            "m\x1ftm\x1fp1 p2\x1fA\x1fa@x.com\x1fMerge\n\x1e\n"
            "p1\x1ftp1\x1f\x1fA\x1fa@x.com\x1fone\n\x1e\n"
            "p2\x1ftp2\x1f\x1fA\x1fa@x.com\x1ftwo\n\x1e\n"
        )
        merge = git_utils.parse_git_log(output)[0]
        self.assertEqual(merge.parent_hash, "p1")
        self.assertEqual(merge.parent_tree, "tp1")

    def test_missing_identity_becomes_unknown(self):
        commits = git_utils.parse_git_log("c\x1ft\x1f\x1f\x1f\x1fmsg\x1e")
        self.assertEqual(commits[0].author_name, "unknown")
        self.assertEqual(commits[0].author_email, "unknown")

    def test_parent_outside_walk_resolved_by_git(self):
        commits = git_utils.parse_git_log("c\x1ft\x1fabc\x1fA\x1fa@x.com\x1fmsg\x1e")
        self.assertEqual(commits[0].parent_tree, "abc^{tree}")

    def test_empty_output(self):
        self.assertEqual(git_utils.parse_git_log(""), [])

    def test_malformed_record(self):
        with self.assertRaises(RepositoryAccessError):
            git_utils.parse_git_log("only\x1ftwo fields\x1e")


@unittest.skipUnless(HAS_GIT, "需要 git 可执行文件")
class TestLocalGitDataSource(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = self._tmp.name
        git(self.repo, "init", "-q")
        self.source = LocalGitDataSource(make_context(self.repo))

    def tearDown(self):
        self._tmp.cleanup()

    def test_empty_repository_yields_nothing(self):
        self.assertEqual(list(self.source.iter_commits()), [])

    def test_not_a_repository(self):
        with tempfile.TemporaryDirectory() as plain_dir:
            source = LocalGitDataSource(make_context(plain_dir))
            with self.assertRaises(RepositoryAccessError):
                list(source.iter_commits())

    def test_every_commit_visited_once(self):
        commit_file(self.repo, "a.txt", "1\n", "first")
        commit_file(self.repo, "a.txt", "1\n2\n", "second", name="Bob", email="bob@x.com")
        commit_file(self.repo, "b.txt", "x\n", "third")

        commits = list(self.source.iter_commits())
        self.assertEqual(len(commits), 3)
        self.assertEqual(len({c.hash for c in commits}), 3)
        self.assertEqual(commits[0].message.strip(), "third")
        self.assertEqual(
            sorted(c.author_email for c in commits),
            ["alice@x.com", "alice@x.com", "bob@x.com"],
        )
        self.assertEqual(sum(1 for c in commits if c.is_root_commit), 1)

    def test_root_commit_diffs_against_empty_tree(self):
        commit_file(self.repo, "a.txt", "one\ntwo\nthree\n", "root")
        (root,) = list(self.source.iter_commits())

        stats = self.source.diff_stats(root.parent_tree, root.tree)
        self.assertIn("a.txt", stats)
        self.assertIn("1 file changed, 3 insertions(+)", stats)

    def test_child_commit_diffstat(self):
        commit_file(self.repo, "a.txt", "one\ntwo\n", "root")
        commit_file(self.repo, "a.txt", "one\nTWO\nthree\n", "edit")
        child = list(self.source.iter_commits())[0]

        stats = self.source.diff_stats(child.parent_tree, child.tree)
        self.assertIn("1 file changed, 2 insertions(+), 1 deletion(-)", stats)

    def test_pure_rename_is_detected(self):
        content = "".join(f"line {i}\n" for i in range(20))
        commit_file(self.repo, "old_name.txt", content, "add")
        git(self.repo, "mv", "old_name.txt", "new_name.txt")
        git(self.repo, "commit", "-q", "-m", "rename")
        rename = list(self.source.iter_commits())[0]

        stats = self.source.diff_stats(rename.parent_tree, rename.tree)
        self.assertIn("=>", stats)
        self.assertIn("1 file changed", stats)
        self.assertNotIn("insertion", stats.replace("0 insertions", ""))

    def test_stat_lines_fit_width(self):
        long_name = "d" * 30 + "/" + "f" * 90 + ".txt"
        os.makedirs(os.path.join(self.repo, "d" * 30))
        commit_file(self.repo, long_name, "x\n" * 50, "long path")
        (root,) = list(self.source.iter_commits())

        stats = self.source.diff_stats(None, root.tree)
        for line in stats.splitlines():
            self.assertLessEqual(len(line), 80)

    def test_bad_tree_raises_diff_error(self):
        commit_file(self.repo, "a.txt", "1\n", "root")
        (root,) = list(self.source.iter_commits())
        with self.assertRaises(DiffComputationError):
            self.source.diff_stats("0" * 40, root.tree)

    def test_non_ascii_path_is_not_escaped(self):
        commit_file(self.repo, "文件.txt", "内容\n", "add")
        (root,) = list(self.source.iter_commits())

        stats = self.source.diff_stats(None, root.tree)
        self.assertIn("文件.txt", stats)
        self.assertNotIn("\\346", stats)

    def test_subdirectory_is_not_a_repository(self):
        commit_file(self.repo, "a.txt", "1\n", "root")
        sub = os.path.join(self.repo, "sub")
        os.makedirs(sub)

        source = LocalGitDataSource(make_context(sub))
        with self.assertRaises(RepositoryAccessError):
            list(source.iter_commits())

    def test_git_dir_and_bare_repository_accepted(self):
        self.assertTrue(git_utils.is_git_repository(self.repo))
        self.assertTrue(git_utils.is_git_repository(os.path.join(self.repo, ".git")))
        with tempfile.TemporaryDirectory() as bare:
            git(bare, "init", "-q", "--bare")
            self.assertTrue(git_utils.is_git_repository(bare))

    def test_merge_history_visits_each_commit_once(self):
        commit_file(self.repo, "a.txt", "1\n", "root")
        git(self.repo, "checkout", "-q", "-b", "side")
        commit_file(self.repo, "b.txt", "side\n", "on side", name="Bob", email="bob@x.com")
        git(self.repo, "checkout", "-q", "-")
        commit_file(self.repo, "a.txt", "1\n2\n", "on main")
        git(self.repo, "merge", "-q", "--no-ff", "--no-edit", "side")

        commits = list(self.source.iter_commits())
        self.assertEqual(len(commits), 4)
        self.assertEqual(len({c.hash for c in commits}), 4)

        merge = commits[0]
        self.assertEqual(merge.hash, git(self.repo, "rev-parse", "HEAD").strip())
        self.assertEqual(merge.parent_hash, git(self.repo, "rev-parse", "HEAD^1").strip())
        self.assertEqual(
            merge.parent_tree, git(self.repo, "rev-parse", "HEAD^1^{tree}").strip()
        )
        # 只对第一个父提交做 diff：side 分支新增的 b.txt 计入合并提交
        stats = self.source.diff_stats(merge.parent_tree, merge.tree)
        self.assertIn("b.txt", stats)
        self.assertNotIn("a.txt", stats)

    def test_log_ignores_show_signature_config(self):
        commit_file(self.repo, "a.txt", "1\n", "root")
        git(self.repo, "config", "log.showSignature", "true")

        (root,) = list(self.source.iter_commits())
        self.assertEqual(root.message.strip(), "root")
        self.assertIn("--no-show-signature", GlobalConfig.GIT_LOG_FORMAT)

    def test_resolve_head_on_detached_garbage(self):
        with open(os.path.join(self.repo, ".git", "HEAD"), "w") as f:
            f.write("0" * 40 + "\n")
        with self.assertRaises(RepositoryAccessError):
            git_utils.resolve_head(self.repo)


if __name__ == "__main__":
    unittest.main()
