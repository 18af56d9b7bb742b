import logging
from datetime import datetime, timezone
from typing import override

from retention.clients.nexus_client import NexusClient, RegistryError
from retention.models import Component, DeletionRecord, RetentionConfig, RetentionSummary, Rule
from retention.repositories import DeletionLogRepository
from retention.services.service import Service
from retention.utils.logging import setup_logger


class RetentionPolicyService(Service):
    """Applies the configured retention rules to every docker hosted repository.

    Components are grouped by image name and matched against the rules in order.
    For a matched image, protected tags are always kept and the most recently
    modified `keep` of the remaining tags survive. Everything else is deleted,
    or only recorded when running in dry-run mode.
    """

    def __init__(self, config: RetentionConfig, dry_run: bool = False, verbose: bool = False):
        self.config: RetentionConfig = config
        self.nexus: NexusClient = NexusClient(
            config.nexus.url,
            config.nexus.username,
            config.nexus.password,
            config.nexus.timeout,
        )
        self.deletion_log: DeletionLogRepository = DeletionLogRepository(config.log_file)
        self.dry_run: bool = dry_run or config.dry_run
        self.verbose: bool = verbose
        self.logger: logging.Logger = setup_logger("RetentionPolicyService")

    @override
    def run(self) -> RetentionSummary:
        if self.dry_run:
            self.logger.info("Dry run mode. No component will be deleted")
        else:
            self.logger.info("Execution mode. Components will be deleted")

        try:
            repositories = self.nexus.get_docker_repositories()
        except RegistryError as e:
            raise RuntimeError(f"Failed to list repositories: {e}") from e
        self.logger.info(f"Found {len(repositories)} docker hosted repositories")

        kept = deleted = failed_deletions = failed_repositories = 0
        for repository in repositories:
            self.logger.info(f"Processing repository {repository.name}")
            try:
                components = self.nexus.get_components(repository.name)
            except RegistryError as e:
                self.logger.warning(f"Skipping repository {repository.name}, failed to list components: {e}")
                failed_repositories += 1
                continue
            self.logger.info(f"Found {len(components)} components in {repository.name}")

            for image_name, group in self.group_by_image_name(components).items():
                group_kept, group_deleted, group_failed = self.process_image_group(
                    repository.name, image_name, group
                )
                kept += group_kept
                deleted += group_deleted
                failed_deletions += group_failed

        summary = RetentionSummary(
            kept=kept,
            deleted=deleted,
            failed_deletions=failed_deletions,
            failed_repositories=failed_repositories,
        )
        self.logger.info(f"Retention run completed. Kept: {summary.kept}, deleted: {summary.deleted}")
        if failed_deletions or failed_repositories:
            self.logger.warning(
                f"{failed_deletions} deletions failed and {failed_repositories} repositories were skipped"
            )
        return summary

    def group_by_image_name(self, components: list[Component]) -> dict[str, list[Component]]:
        # groups keep the order in which each image name was first listed
        groups: dict[str, list[Component]] = {}
        for component in components:
            groups.setdefault(component.name, []).append(component)
        return groups

    def process_image_group(
        self, repository: str, image_name: str, components: list[Component]
    ) -> tuple[int, int, int]:
        rule = self.config.match_rule(image_name)
        if rule is None:
            log = self.logger.info if self.verbose else self.logger.debug
            log(f"Image {image_name} has no matching rule, skipping")
            return 0, 0, 0

        self.logger.info(f"Image {image_name} (rule: {rule.name}, keep: {rule.keep})")
        protected, to_keep, to_delete = self.partition(components, rule)

        for component in protected:
            self.logger.info(f"Keeping {image_name}:{component.version} (protected)")
        for component in to_keep:
            self.logger.info(f"Keeping {image_name}:{component.version}")

        deleted = failed = 0
        for component in to_delete:
            if self.delete(repository, image_name, component, rule):
                deleted += 1
            else:
                failed += 1
        return len(protected) + len(to_keep), deleted, failed

    def partition(
        self, components: list[Component], rule: Rule
    ) -> tuple[list[Component], list[Component], list[Component]]:
        """Split a group into (protected, kept, deleted) components.

        Regular components are ordered by last modification, newest first. The
        sort is stable, so components with identical timestamps stay in the
        order the registry listed them.
        """
        protected = [c for c in components if self.config.is_protected(c.version)]
        regular = [c for c in components if not self.config.is_protected(c.version)]
        regular = sorted(regular, key=lambda c: c.last_modified, reverse=True)
        return protected, regular[:rule.keep], regular[rule.keep:]

    def delete(self, repository: str, image_name: str, component: Component, rule: Rule) -> bool:
        if self.dry_run:
            self.logger.info(f"Dry run mode. {image_name}:{component.version} would be deleted")
        else:
            try:
                self.nexus.delete_component(component.id)
            except RegistryError as e:
                self.logger.warning(f"Failed to delete {image_name}:{component.version}: {e}")
                return False
            self.logger.info(f"Deleted {image_name}:{component.version}")

        self.deletion_log.append(
            DeletionRecord(
                timestamp=datetime.now(timezone.utc),
                repository=repository,
                image_name=image_name,
                tag=component.version,
                component_id=component.id,
                rule=rule.name,
                dry_run=self.dry_run,
            )
        )
        return True
