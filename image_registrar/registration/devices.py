"""Merge of the image's default devices with the launch-time devices"""

from typing import Dict, Iterable, List, Mapping

from ..configs import BlockDeviceMapping, EbsBlockDevice, RootDeviceSpec


def reconcile(
    base_devices: Iterable[BlockDeviceMapping],
    override_devices: Iterable[BlockDeviceMapping],
    snapshot_ids: Mapping[str, str],
    omit: Mapping[str, bool],
    root_device: RootDeviceSpec,
) -> List[BlockDeviceMapping]:
    """
    Combine ``base_devices`` (ami_block_device_mappings) with
    ``override_devices`` (launch_block_device_mappings) into the device list
    the image is registered with.

    Launch devices replace image devices with the same final name. A launch
    device flagged in ``omit`` is dropped together with any image device of
    the same name. Launch EBS devices with a freshly created snapshot get that
    snapshot and inherit its encryption settings; instance-store and
    ``NoDevice`` entries are left as they are. The launch device named by
    ``root_device.source_device_name`` is renamed to
    ``root_device.device_name`` and takes the place of any image device
    carrying either name; image devices are never renamed on their own.

    Inputs are not modified. The result is sorted by device name.
    """
    devices: Dict[str, BlockDeviceMapping] = {}

    for device in base_devices:
        if omit.get(device.device_name, False):
            continue
        devices[device.device_name] = device

    for device in override_devices:
        if omit.get(device.device_name, False):
            continue

        device = device.model_copy(deep=True)

        snapshot_id = snapshot_ids.get(device.device_name)
        # Instance-store and suppressed devices cannot carry an EBS block
        if snapshot_id is not None and device.virtual_name is None and device.no_device is None:
            if device.ebs is None:
                device.ebs = EbsBlockDevice()
            device.ebs.snapshot_id = snapshot_id
            # Encryption comes from the snapshot
            device.ebs.encrypted = None
            device.ebs.kms_key_id = None

        if device.device_name == root_device.source_device_name:
            # The renamed entry replaces the source one, no duplicate left behind
            devices.pop(device.device_name, None)
            device.device_name = root_device.device_name

        devices[device.device_name] = device

    return [devices[name] for name in sorted(devices)]
