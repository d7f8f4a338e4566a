"""Linux and macOS commands for the OS executor."""

from clocked.system.executor import CommandExecutor


class LinuxExecutor(CommandExecutor):
    platform_name = "Linux"

    shutdown_command = "sudo shutdown -h now"
    reboot_command = "sudo reboot"
    lock_command = "gnome-screensaver-command -l || xdg-screensaver lock || i3lock"
    hibernate_command = "systemctl hibernate || pm-hibernate"

    async def set_do_not_disturb(self, enabled: bool) -> None:
        # GNOME hides notification banners when show-banners is false
        banners = "false" if enabled else "true"
        await self.run_checked(
            f"gsettings set org.gnome.desktop.notifications show-banners {banners}"
        )


class MacOSExecutor(CommandExecutor):
    platform_name = "macOS"

    shutdown_command = "sudo shutdown -h now"
    reboot_command = "sudo reboot"
    lock_command = (
        "/System/Library/CoreServices/Menu\\ Extras/User.menu/Contents/Resources/"
        "CGSession -suspend"
    )
    # No native hibernate; sleep is the closest equivalent
    hibernate_command = "pmset sleepnow"

    async def set_do_not_disturb(self, enabled: bool) -> None:
        value = "true" if enabled else "false"
        await self.run_checked(
            "defaults -currentHost write "
            "~/Library/Preferences/ByHost/com.apple.notificationcenterui "
            f"doNotDisturb -boolean {value}"
        )
