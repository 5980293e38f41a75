"""Ray-casting core: geometry, scene, intersectors, radial sampler and shader."""
